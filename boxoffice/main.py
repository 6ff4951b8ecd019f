from fastapi import FastAPI
from boxoffice.api.v1.routes import auth, venues, concerts, ticket_types, sales, purchases, tickets
from boxoffice.api.exceptions import register_error_handlers
from boxoffice.core.logging import configure_logging
from boxoffice.core.middleware.http_ctx import HttpContextMiddleware
from boxoffice.core.redis import create_redis


async def lifespan(app: FastAPI):
    r = await create_redis()
    app.state.redis = r
    try:
        yield
    finally:
        if r is not None:
            await r.aclose()


configure_logging()

app = FastAPI(title="boxoffice", lifespan=lifespan)
app.add_middleware(HttpContextMiddleware, request_id_header="X-Request-ID")
register_error_handlers(app)
app.include_router(auth.router)
app.include_router(venues.router)
app.include_router(concerts.router)
app.include_router(ticket_types.router)
app.include_router(sales.router)
app.include_router(purchases.router)
app.include_router(tickets.router)
