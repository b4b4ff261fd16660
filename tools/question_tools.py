from all_types.request_dtypes import ReqWeatherQuestion
from context import AppContext
from logging_config import get_logger
from models import ToolResult
from services.intent import classify_question
from services.prompts import question_prompt
from tools.common import city_forecast, city_weather, narrate

logger = get_logger(__name__)

NO_COMPLETION_RESPONSE = (
    "I'd be happy to help with weather questions! However, AI analysis is not available "
    "right now. Try asking about specific weather data for a city."
)
QUESTION_FALLBACK = (
    "I'd be happy to help with weather questions! Could you specify a location so I can "
    "provide accurate information?"
)


def register_question_tools(app_ctx: AppContext):
    logger.info("Registering question tools")

    @app_ctx.registry.tool(
        name="ask_weather_question",
        description="""Answer a free-text weather question.

        When a city is given or can be found in the question, answers with
        current conditions or, for forecast/week/days questions, a 7-day
        forecast. Mentioning Fahrenheit switches the unit. Other questions
        are answered conversationally.
        """,
        args_model=ReqWeatherQuestion,
    )
    async def ask_weather_question(args: ReqWeatherQuestion) -> ToolResult:
        intent = classify_question(args.question, args.city)
        logger.info(
            f"Question intent: city={intent.city} forecast={intent.wants_forecast} "
            f"fahrenheit={intent.fahrenheit}"
        )

        if intent.city:
            if intent.wants_forecast:
                return await city_forecast(app_ctx, intent.city, 7, intent.fahrenheit)
            return await city_weather(app_ctx, intent.city, intent.fahrenheit)

        if app_ctx.completion is None:
            return ToolResult.text(NO_COMPLETION_RESPONSE)

        answer = await narrate(app_ctx.completion, question_prompt(args.question), QUESTION_FALLBACK)
        return ToolResult.text(answer)
