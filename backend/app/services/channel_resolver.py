"""
Channel resolution cascade.

The input is classified once, then an ordered chain of strategies runs over it.
Each strategy either resolves (returns a result and stops the chain), fails
(raises NotFoundError) or lets the next strategy continue. Cheaper lookups sit
first so the search endpoint is only billed when no channel id is derivable.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Union

try:
    from backend.app.services import channel_details
    from backend.app.services.errors import InvalidInputError, NotFoundError, YouTubeApiError, translate_upstream_errors
    from backend.app.services.identifier import HintKind, IdentifierHint, classify
    from backend.app.services.models import CandidateChannel, Channel
except ModuleNotFoundError:
    from app.services import channel_details
    from app.services.errors import InvalidInputError, NotFoundError, YouTubeApiError, translate_upstream_errors
    from app.services.identifier import HintKind, IdentifierHint, classify
    from app.services.models import CandidateChannel, Channel

logger = logging.getLogger(__name__)

ChannelResolution = Union[Channel, list[CandidateChannel]]


class Outcome(str, Enum):
    RESOLVED = "resolved"
    CONTINUE = "continue"
    FAIL = "fail"


@dataclass
class ResolutionState:
    raw: str
    hint: IdentifierHint
    channel_id: str | None = None
    attempted: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class StepResult:
    outcome: Outcome
    value: ChannelResolution | None = None
    reason: str | None = None

    @classmethod
    def resolved(cls, value: ChannelResolution) -> "StepResult":
        return cls(Outcome.RESOLVED, value=value)

    @classmethod
    def proceed(cls) -> "StepResult":
        return cls(Outcome.CONTINUE)

    @classmethod
    def fail(cls, reason: str) -> "StepResult":
        return cls(Outcome.FAIL, reason=reason)


Strategy = Callable[[ResolutionState], StepResult]


def direct_id_strategy(state: ResolutionState) -> StepResult:
    channel_id = state.hint.channel_id
    if channel_id is None:
        return StepResult.proceed()
    channel = channel_details.fetch_channel_details(channel_id)
    if channel is not None:
        return StepResult.resolved(channel)
    # Stale or malformed ids still get a chance through search.
    logger.info("Channel id %s not found, falling back to search", channel_id)
    return StepResult.proceed()


def handle_strategy(state: ResolutionState) -> StepResult:
    if state.hint.kind != HintKind.HANDLE:
        return StepResult.proceed()
    try:
        state.channel_id = channel_details.fetch_channel_id_for_handle(state.hint.value)
    except YouTubeApiError as exc:
        logger.warning("Handle lookup for %s failed, continuing: %s", state.hint.value, exc)
        state.channel_id = None
    return StepResult.proceed()


def search_strategy(state: ResolutionState) -> StepResult:
    if state.channel_id is not None:
        return StepResult.proceed()
    candidates = channel_details.search_channels(state.raw)
    if not candidates:
        return StepResult.fail("Channel not found.")
    if len(candidates) > 1:
        return StepResult.resolved(candidates)
    state.channel_id = candidates[0].channel_id
    return StepResult.proceed()


def detail_strategy(state: ResolutionState) -> StepResult:
    if state.channel_id is None:
        return StepResult.fail("Channel not found.")
    channel = channel_details.fetch_channel_details(state.channel_id)
    if channel is None:
        return StepResult.fail("Channel not found.")
    return StepResult.resolved(channel)


DEFAULT_STRATEGIES: tuple[Strategy, ...] = (
    direct_id_strategy,
    handle_strategy,
    search_strategy,
    detail_strategy,
)


def run_strategies(state: ResolutionState, strategies: tuple[Strategy, ...]) -> ChannelResolution:
    for strategy in strategies:
        state.attempted.append(strategy.__name__)
        result = strategy(state)
        if result.outcome == Outcome.RESOLVED:
            return result.value  # type: ignore[return-value]
        if result.outcome == Outcome.FAIL:
            logger.info("Resolution of %r failed after %s", state.raw, " -> ".join(state.attempted))
            raise NotFoundError(result.reason)
    logger.info("Resolution of %r exhausted %s", state.raw, " -> ".join(state.attempted) or "no strategies")
    raise NotFoundError("Channel not found.")


@translate_upstream_errors
def resolve_channel(raw: str | None, strategies: tuple[Strategy, ...] = DEFAULT_STRATEGIES) -> ChannelResolution:
    hint = classify(raw)
    state = ResolutionState(raw=raw or "", hint=hint)
    logger.info("Resolving channel input %r as %s", raw, hint.kind.value)
    return run_strategies(state, strategies)


@translate_upstream_errors
def resolve_channel_by_video(video_id: str | None) -> Channel:
    if video_id is None or not video_id.strip():
        raise InvalidInputError("videoId is required.")
    channel_id = channel_details.fetch_video_channel_id(video_id.strip())
    if not channel_id:
        raise NotFoundError("Video not found.")
    channel = channel_details.fetch_channel_details(channel_id)
    if channel is None:
        raise NotFoundError("Channel not found.")
    return channel
