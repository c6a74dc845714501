"""
Pipeline Orchestrator (v3.0.0)
Photo + hints -> complete outfit recommendation.

Stages run in order: vision -> styling -> context -> image. Each stage is
wrapped so a failure degrades the result instead of aborting the request.
"""
import re
import time
import uuid
import random
import logging
from typing import Dict, Any, List, Optional, Sequence

from stylist_service.config import get_settings
from stylist_service.core.errors import MalformedOutput, UpstreamFailure
from stylist_service.core.models import (
    ColorAnalysis,
    GarmentAttributes,
    ImageInput,
    OutfitComponents,
    RecommendationResponse,
    StylingResult,
    FIT_VALUES,
)
from stylist_service.core.style_rules import (
    DEFAULT_LOGIC,
    OCCASIONS,
    recommend,
)
from stylist_service.core.color_rules import DEFAULT_PAIRINGS, DEFAULT_HARMONY
from stylist_service.services.context import adjust_outfit_for_weather
from stylist_service.renderer.image_synthesizer import PLACEHOLDER_IMAGE_URL
from stylist_service.observability import (
    log_request,
    increment_request,
    record_fallback,
    record_classification_failure,
)

logger = logging.getLogger(__name__)


# ==================== FALLBACK GARMENT ====================

FALLBACK_GARMENT_TYPES = ["t-shirt", "blouse", "sweater", "jeans", "skirt", "trousers", "dress", "blazer"]
FALLBACK_STYLES = ["Minimalist", "Streetwear", "Business Casual", "Bohemian", "Preppy", "Y2K"]
FALLBACK_COLORS = ["Black", "White", "Navy Blue", "Beige", "Gray", "Olive Green"]
FALLBACK_FITS = list(FIT_VALUES)
FALLBACK_OCCASIONS = list(OCCASIONS)


def make_fallback_garment(rng: random.Random) -> GarmentAttributes:
    """Draw one placeholder garment from the fixed pools."""
    return GarmentAttributes(
        garment_type=rng.choice(FALLBACK_GARMENT_TYPES),
        aesthetic_style=rng.choice(FALLBACK_STYLES),
        primary_color=rng.choice(FALLBACK_COLORS),
        fit=rng.choice(FALLBACK_FITS),
        occasion=(rng.choice(FALLBACK_OCCASIONS),),
    )


# Message words that imply an occasion
OCCASION_KEYWORDS = {
    "formal": "formal",
    "wedding": "formal",
    "gala": "formal",
    "business": "business",
    "work": "business",
    "office": "business",
    "interview": "business",
    "meeting": "business",
    "casual": "casual",
    "weekend": "casual",
    "party": "party",
    "club": "party",
}


def occasion_from_message(message: Optional[str]) -> Optional[str]:
    """First occasion keyword found in the user's message, if any."""
    if not message:
        return None
    for word in re.findall(r"[a-z]+", message.lower()):
        if word in OCCASION_KEYWORDS:
            return OCCASION_KEYWORDS[word]
    return None


# ==================== RESPONSE ASSEMBLY ====================

EXPLANATION_TRAILER = "Each piece was chosen to work with the others as one cohesive look."
CONTEXT_UNAVAILABLE_NOTE = "Weather details are unavailable right now, so choose layers you can adjust through the day."


def static_styling_result(garment: GarmentAttributes) -> StylingResult:
    """Minimal styling used when the rule engine itself fails."""
    return StylingResult(
        base_garment=garment,
        styling_logic=DEFAULT_LOGIC,
        recommendations=["Pair with neutral basics and simple accessories."],
        color_analysis=ColorAnalysis(
            primary=garment.primary_color or "Neutral",
            complementary=list(DEFAULT_PAIRINGS),
            harmony_type=DEFAULT_HARMONY,
        ),
        outfit_components=OutfitComponents(),
        confidence_score=50,
    )


def build_response(
    request_id: str,
    styling: StylingResult,
    weather_note: str,
    image_url: str,
    garments: Sequence[GarmentAttributes],
    used_fallback_garment: bool
) -> RecommendationResponse:
    """Merge stage outputs into the final response."""
    if used_fallback_garment:
        prefix = "No uploaded garment could be analyzed, so this look starts from a curated default piece."
    else:
        count = len(garments)
        prefix = f"Based on analysis of {count} uploaded garment{'s' if count != 1 else ''}."

    return RecommendationResponse(
        request_id=request_id,
        explanation=f"{styling.styling_logic} {EXPLANATION_TRAILER}",
        logic=f"{prefix} {styling.styling_logic}",
        weather_adjustment=weather_note,
        recommendations=tuple(styling.recommendations),
        generated_image_url=image_url,
        color_analysis=styling.color_analysis,
        confidence_score=styling.confidence_score,
        garment_analyses=tuple(garments),
        used_fallback_garment=used_fallback_garment,
    )


# ==================== ORCHESTRATOR ====================

class Orchestrator:
    """
    Run the recommendation pipeline.

    Usage:
        orchestrator = Orchestrator()
        response = await orchestrator.orchestrate(images, "what goes with this?", {"location": "Paris"})
    """

    def __init__(
        self,
        classifier=None,
        synthesizer=None,
        weather_client=None,
        session_store=None,
        rng: Optional[random.Random] = None,
        settings=None
    ):
        self.settings = settings or get_settings()

        if classifier is None:
            from stylist_service.llm import GeminiVisionClient
            from stylist_service.vision.classifier import VisionClassifier
            classifier = VisionClassifier(GeminiVisionClient(), timeout=self.settings.request_timeout_seconds)

        if synthesizer is None:
            from stylist_service.llm import OpenAIImageClient
            from stylist_service.renderer.image_synthesizer import ImageSynthesizer
            synthesizer = ImageSynthesizer(OpenAIImageClient(), settings=self.settings)

        if weather_client is None:
            from stylist_service.services.weather import OpenWeatherClient
            weather_client = OpenWeatherClient()

        if session_store is None:
            from stylist_service.cache import create_session_store
            session_store = create_session_store(self.settings)

        self.classifier = classifier
        self.synthesizer = synthesizer
        self.weather_client = weather_client
        self.session_store = session_store
        self.rng = rng or random.Random()

    async def orchestrate(
        self,
        images: Sequence[ImageInput],
        message: Optional[str] = None,
        context: Optional[Dict[str, Optional[str]]] = None
    ) -> RecommendationResponse:
        """
        Produce a complete recommendation. Never raises for upstream failures.

        Anything else escaping a stage is recorded as a failed request and
        re-raised for the ingress layer.

        Args:
            images: Uploaded garment photos (may be empty)
            message: Free-text user message
            context: Optional {"location": ..., "occasion": ..., "country": ...}
        """
        request_id = uuid.uuid4().hex
        start_time = time.time()
        context = context or {}
        fallback_stages: List[str] = []

        try:
            response = await self._run_pipeline(request_id, images, message, context, fallback_stages)
        except Exception as e:
            latency_ms = int((time.time() - start_time) * 1000)
            logger.error(f"[{request_id}] Pipeline failed after {latency_ms}ms: {e}")
            self._track_request(request_id, len(images), 0, fallback_stages, latency_ms, "fail", message, str(e))
            raise

        latency_ms = int((time.time() - start_time) * 1000)
        self._track_request(
            request_id, len(images), len(response.garment_analyses), fallback_stages, latency_ms, "success", message
        )
        logger.info(f"[{request_id}] Pipeline complete in {latency_ms}ms (fallbacks={fallback_stages or 'none'})")

        return response

    def get_session(self, request_id: str) -> Optional[Dict[str, Any]]:
        """Stored response dict for a request id, or None."""
        return self.session_store.get(request_id)

    async def _run_pipeline(
        self,
        request_id: str,
        images: Sequence[ImageInput],
        message: Optional[str],
        context: Dict[str, Optional[str]],
        fallback_stages: List[str]
    ) -> RecommendationResponse:
        location = context.get("location") or self.settings.default_location
        occasion = context.get("occasion") or occasion_from_message(message) or self.settings.default_occasion
        occasion = occasion.strip().lower()

        logger.info(
            f"[{request_id}] Pipeline starting: images={len(images)}, location={location}, "
            f"occasion={occasion}, message={(message or '')[:80]!r}"
        )

        # Step 1: Vision (parallel, settle-all)
        garments = await self._classify_stage(request_id, images)

        # Step 2: Fallback garment
        used_fallback_garment = not garments
        if used_fallback_garment:
            fallback = make_fallback_garment(self.rng)
            logger.info(f"[{request_id}] No garments classified, using fallback {fallback.garment_type}")
            fallback_stages.append("vision")
            styling_input = [fallback]
        else:
            styling_input = garments

        # Step 3: Rule engine
        styling = self._styling_stage(request_id, styling_input, occasion, fallback_stages)

        # Step 4: Weather + trends
        weather_note = await self._context_stage(request_id, styling, location, context.get("country"), fallback_stages)

        # Step 5: Image
        image_url = await self._image_stage(request_id, styling, occasion, location, fallback_stages)

        # Step 6: Merge
        response = build_response(
            request_id=request_id,
            styling=styling,
            weather_note=weather_note,
            image_url=image_url,
            garments=garments,
            used_fallback_garment=used_fallback_garment,
        )

        self._store(request_id, response)
        return response

    # ==================== STAGES ====================

    async def _classify_stage(self, request_id: str, images: Sequence[ImageInput]) -> List[GarmentAttributes]:
        if not images:
            return []

        try:
            results = await self.classifier.classify_batch(images)
        except Exception as e:
            logger.error(f"[{request_id}] Vision stage failed: {e}")
            for _ in images:
                record_classification_failure("error")
            return []

        garments = []
        for result in results:
            if result.success:
                garments.append(result.garment)
            elif isinstance(result.error, UpstreamFailure):
                record_classification_failure(result.error.reason)
            elif isinstance(result.error, MalformedOutput):
                record_classification_failure("malformed")
            else:
                record_classification_failure("error")

        logger.info(f"[{request_id}] Vision: {len(garments)}/{len(images)} garments classified")
        return garments

    def _styling_stage(
        self,
        request_id: str,
        garments: Sequence[GarmentAttributes],
        occasion: str,
        fallback_stages: List[str]
    ) -> StylingResult:
        try:
            return recommend(garments, {"occasion": occasion}, rng=self.rng)
        except Exception as e:
            logger.error(f"[{request_id}] Rule engine failed: {e}")
            fallback_stages.append("styling")
            return static_styling_result(garments[0])

    async def _context_stage(
        self,
        request_id: str,
        styling: StylingResult,
        location: str,
        country: Optional[str],
        fallback_stages: List[str]
    ) -> str:
        try:
            contextual = await adjust_outfit_for_weather(
                styling,
                location,
                country=country,
                weather_client=self.weather_client,
                timeout=self.settings.request_timeout_seconds,
            )
        except Exception as e:
            logger.error(f"[{request_id}] Context stage failed: {e}")
            fallback_stages.append("context")
            return CONTEXT_UNAVAILABLE_NOTE

        if contextual.weather.is_mock:
            fallback_stages.append("context")
        return contextual.contextual_notes

    async def _image_stage(
        self,
        request_id: str,
        styling: StylingResult,
        occasion: str,
        location: str,
        fallback_stages: List[str]
    ) -> str:
        try:
            url = await self.synthesizer.synthesize(styling, {"occasion": occasion, "setting": location})
        except Exception as e:
            logger.error(f"[{request_id}] Image stage failed: {e}")
            url = PLACEHOLDER_IMAGE_URL

        if url == PLACEHOLDER_IMAGE_URL:
            fallback_stages.append("image")
        return url

    # ==================== BOOKKEEPING ====================

    def _store(self, request_id: str, response: RecommendationResponse):
        try:
            self.session_store.set(request_id, response.to_dict())
        except Exception as e:
            logger.warning(f"[{request_id}] Session store write failed: {e}")

    def _track_request(
        self,
        request_id: str,
        image_count: int,
        garments_classified: int,
        fallback_stages: List[str],
        latency_ms: int,
        status: str,
        message: Optional[str] = None,
        error: str = None
    ):
        """Track request in logs and metrics."""
        if self.settings.logging_enabled:
            try:
                log_request(request_id, image_count, garments_classified, fallback_stages, latency_ms, status, message, error)
            except OSError as e:
                logger.warning(f"[{request_id}] Request log write failed: {e}")

        for stage in fallback_stages:
            record_fallback(stage)
        increment_request(image_count, garments_classified, error is not None)
