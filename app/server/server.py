from core.config import settings
from core.logging import get_module_logger
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.router import api_router
from api.dependencies.rate_limits import setup_rate_limiter
from server.lifespan import lifespan

logger = get_module_logger()


handler = FastAPI(
    title="Security Hub Findings",
    description="AWS Security Hub findings exposed as aws_securityhub_finding table rows.",
    lifespan=lifespan,
)
setup_rate_limiter(handler)

allow_origins = ["*"] if settings.is_production else settings.server.ALLOW_ORIGINS
handler.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)


handler.include_router(api_router)
