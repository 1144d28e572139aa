"""Chat orchestrator: one user message in, one coach reply out.

Per exchange the pipeline runs strictly in this order:
    1. Safety filter      -- medical questions get a fixed refusal, nothing else runs
    2. FAQ direct answer  -- strong corpus match answers without the model
    3. Model generation   -- system prompt + last 10 turns + FAQ-enriched text
    4. Structuring        -- reply text -> workout plan / tips list / plain text

Every completed exchange persists the user and assistant turns and signals
exactly one coin, whichever path produced the reply. A model failure
persists nothing and signals no coin; the RemoteGenerationFailure is
re-raised untouched so the caller can decide whether to offer a retry.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime

from fitcoach.agent.llm import DEFAULT_PARAMS, GeminiGenerator, GenerationParams, TextGenerator
from fitcoach.agent.personalities import PersonalityProfile
from fitcoach.agent.response_cache import ResponseCache, request_fingerprint
from fitcoach.agent.response_parser import PlainText, StructuredContent, classify_content
from fitcoach.agent.retrieval import direct_answer, enrich_prompt, suggested_questions
from fitcoach.agent.safety import REFUSAL_MESSAGE, is_restricted, matched_keywords
from fitcoach.agent.system_prompt import build_system_prompt
from fitcoach.memory.profile import LifestyleSnapshot, ProfileStore
from fitcoach.memory.sessions import ConversationTurn, SessionStore

logger = logging.getLogger(__name__)

# -- Configuration -----------------------------------------------------------

HISTORY_WINDOW = 10        # Turns of prior conversation sent to the model
COINS_PER_EXCHANGE = 1
FAQ_MARKER = "\n\n💡 *This answer is from our curated fitness FAQ*"

PATH_SAFETY = "safety"
PATH_FAQ = "faq"
PATH_MODEL = "model"


# -- Types -------------------------------------------------------------------

@dataclass
class UserContext:
    """Everything the pipeline needs to know about the sender."""
    user_id: str
    session_key: str
    personality: PersonalityProfile | str
    lifestyle: LifestyleSnapshot
    tenure_days: int


@dataclass
class ExchangeResult:
    """Result of processing one user message."""
    reply_text: str
    structured_content: StructuredContent
    is_safety_refusal: bool = False
    suggested_follow_ups: list[str] = field(default_factory=list)
    coin_delta: int = COINS_PER_EXCHANGE
    path: str = PATH_MODEL
    cached: bool = False

    @property
    def from_faq(self) -> bool:
        return self.path == PATH_FAQ

    def to_dict(self) -> dict:
        return {
            "reply_text": self.reply_text,
            "structured_content": self.structured_content.to_dict(),
            "is_safety_refusal": self.is_safety_refusal,
            "suggested_follow_ups": list(self.suggested_follow_ups),
            "coin_delta": self.coin_delta,
            "path": self.path,
            "cached": self.cached,
        }


def build_user_context(
    profiles: ProfileStore,
    sessions: SessionStore,
    user_id: str,
    session_key: str | None = None,
    now: datetime | None = None,
) -> UserContext:
    """Assemble a UserContext from the stored profile and the current session."""
    profile = profiles.load(user_id)
    if profile is None:
        raise FileNotFoundError(f"No profile found for user {user_id}")
    return UserContext(
        user_id=user_id,
        session_key=session_key or sessions.current_session(user_id),
        personality=PersonalityProfile.from_id(profile.personality),
        lifestyle=profile.lifestyle,
        tenure_days=profiles.tenure_days(user_id, now),
    )


# -- The Orchestrator ----------------------------------------------------------

class ChatOrchestrator:
    """Runs the content pipeline for one exchange at a time.

    Usage:
        orchestrator = ChatOrchestrator(session_store=SessionStore())
        result = orchestrator.evaluate("Give me a 3 day beginner plan", context)
        print(result.reply_text)
    """

    def __init__(
        self,
        session_store: SessionStore,
        generator: TextGenerator | None = None,
        cache: ResponseCache | None = None,
        params: GenerationParams = DEFAULT_PARAMS,
        history_window: int = HISTORY_WINDOW,
    ):
        self.sessions = session_store
        self.generator = generator or GeminiGenerator()
        self.cache = cache
        self.params = params
        self.history_window = history_window

    def evaluate(self, user_text: str, context: UserContext) -> ExchangeResult:
        """Process one user message and return the reply plus structured content.

        Raises:
            ValueError: if the message is blank.
            RemoteGenerationFailure: if the model call fails (nothing persisted).
            PersistenceFailure: if the session store cannot be read or written.
        """
        text = (user_text or "").strip()
        if not text:
            raise ValueError("Message must not be empty")

        restricted = is_restricted(text)

        # Suggestions always come from the user's own words, never the enriched prompt
        suggestions = suggested_questions(text)

        if restricted:
            logger.info(
                "Safety refusal for user %s (matched: %s)",
                context.user_id, ", ".join(matched_keywords(text)),
            )
            self._persist(context.session_key, text, REFUSAL_MESSAGE)
            return ExchangeResult(
                reply_text=REFUSAL_MESSAGE,
                structured_content=PlainText(text=REFUSAL_MESSAGE),
                is_safety_refusal=True,
                suggested_follow_ups=suggestions,
                path=PATH_SAFETY,
            )

        faq_answer = direct_answer(text)
        if faq_answer is not None:
            reply = faq_answer + FAQ_MARKER
            logger.info("Answered from FAQ for user %s", context.user_id)
            self._persist(context.session_key, text, reply)
            return ExchangeResult(
                reply_text=reply,
                structured_content=classify_content(reply),
                suggested_follow_ups=suggestions,
                path=PATH_FAQ,
            )

        reply, cached = self._generate(text, context)
        self._persist(context.session_key, text, reply)
        return ExchangeResult(
            reply_text=reply,
            structured_content=classify_content(reply),
            suggested_follow_ups=suggestions,
            path=PATH_MODEL,
            cached=cached,
        )

    def _generate(self, text: str, context: UserContext) -> tuple[str, bool]:
        """Call the model (or the cache) and return (reply, served_from_cache)."""
        outgoing = enrich_prompt(text)
        system_instruction = build_system_prompt(
            context.personality, context.tenure_days, context.lifestyle,
        )
        history = self.sessions.load_recent_turns(context.session_key, self.history_window)
        logger.info(
            "Generating reply for user %s (tenure %d days, %d history turns)",
            context.user_id, context.tenure_days, len(history),
        )

        key = None
        if self.cache is not None:
            key = request_fingerprint(system_instruction, history, outgoing)
            hit = self.cache.get(key)
            if hit is not None:
                logger.info("Response cache hit for user %s", context.user_id)
                return hit, True

        reply = self.generator.generate(system_instruction, history, outgoing, self.params)

        if key is not None:
            self.cache.put(key, reply)
        return reply, False

    def _persist(self, session_key: str, user_text: str, reply: str) -> None:
        self.sessions.append_turns(session_key, [
            ConversationTurn(role="user", content=user_text),
            ConversationTurn(role="assistant", content=reply),
        ])
