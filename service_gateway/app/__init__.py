"""
API Gateway Service package for the Galaxy backend.

The gateway fronts client requests, enforcing:
- Authentication: bearer tokens resolved by the backend Authorize call
- Ownership: users may only read and update their own profile
- Error translation: backend status codes mapped per endpoint

Structure:
- app.main: FastAPI app, routes, and middleware wiring.
- app.models: Public JSON request and response shapes.
- app.adapters: Backend RPC client and contract.
- app.auth: Password hashing.
- app.domain: Auth middleware, login flow, partial updates, error
  translation and the per-resource handlers.
"""
