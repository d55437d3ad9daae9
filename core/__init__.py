"""
Coffee Cart Core Module

- db: storage clients (Supabase + Redis)
- cart: per-user cart engine and Redis cart store
- services: catalog models, repositories and money helpers
- auth: session-based identity
- routers: FastAPI endpoints
"""
