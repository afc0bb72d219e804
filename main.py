"""
FastAPI Application - Order Events
Runs the producer or the consumer depending on SERVICE_ROLE
"""

# Load environment variables from .env file FIRST before any other imports
from dotenv import load_dotenv
load_dotenv()

from order_events.app import create_app
from order_events.core.config import get_settings
from order_events.core.logger import logger

settings = get_settings()
app = create_app(settings)


if __name__ == "__main__":
    import uvicorn

    logger.info(
        f"Starting {settings.service_name} {settings.service_role} on port {settings.port}",
        metadata={
            "service_name": settings.service_name,
            "role": settings.service_role,
            "version": settings.service_version,
            "environment": settings.environment,
            "port": settings.port,
        },
    )

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.environment == "development",
    )
