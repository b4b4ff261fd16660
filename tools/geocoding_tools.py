from all_types.internal_types import Err
from all_types.request_dtypes import ReqGeocodeCity
from context import AppContext
from logging_config import get_logger
from models import ToolResult
from services.formatting import format_geocode_results
from utils.json_handler import convert_to_serializable

logger = get_logger(__name__)


def register_geocoding_tools(app_ctx: AppContext):
    logger.info("Registering geocoding tools")

    @app_ctx.registry.tool(
        name="geocode_city",
        description="""Look up candidate locations for a city name.

        Returns up to `count` matches (1-100) with coordinates, region,
        population, elevation and timezone, in the geocoder's ranking order.
        """,
        args_model=ReqGeocodeCity,
    )
    async def geocode_city(args: ReqGeocodeCity) -> ToolResult:
        located = await app_ctx.weather.geocode(args.city, args.count)
        if isinstance(located, Err):
            return ToolResult.error(f"Error geocoding {args.city}: {located.detail}")

        return ToolResult.text(
            format_geocode_results(args.city, located.value),
            structured={"locations": convert_to_serializable(located.value)},
        )
