"""路由组级别的中间件，以依赖形式挂在 APIRouter 上。"""
import logging

logger = logging.getLogger(__name__)


async def only_v1_middleware():
    logger.info("enter only-v1 middleware")
    yield
    logger.info("leave only-v1 middleware")
