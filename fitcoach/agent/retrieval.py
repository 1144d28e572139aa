"""FAQ retrieval: keyword relevance over the curated fitness FAQ.

Three views are built on one ranking:
    direct answer  -- best match strong enough to skip the model entirely
    enrichment     -- top matches appended to the outgoing model prompt
    suggestions    -- related questions offered back to the user

Scoring is deliberately simple keyword overlap, not semantic search.
Every query token counts in the denominator, including short filler words
that can never match, so long chatty questions score lower than terse ones.
"""

from dataclasses import dataclass

from fitcoach.memory.faq_corpus import FITNESS_FAQS, FAQEntry

# -- Configuration -----------------------------------------------------------

MIN_TOKEN_LENGTH = 3           # Shorter query tokens never match
DIRECT_MATCH_THRESHOLD = 0.3   # Candidate floor for the direct-answer lookup
DIRECT_ANSWER_MIN_SCORE = 0.5  # Best match must score strictly above this
ENRICHMENT_THRESHOLD = 0.25
ENRICHMENT_LIMIT = 2
SUGGESTION_THRESHOLD = 0.2
SUGGESTION_LIMIT = 3

FAQ_CONTEXT_HEADER = "[Relevant FAQ Context]:"


@dataclass(frozen=True)
class RelevanceMatch:
    question: str
    answer: str
    score: float


def score(query: str, candidate_question: str) -> float:
    """Fraction of query tokens that overlap a token of the candidate question.

    A query token of at least MIN_TOKEN_LENGTH chars matches when it is a
    substring of, or contains, any candidate token. Returns 0.0 for an
    empty query.
    """
    query_tokens = query.lower().split()
    if not query_tokens:
        return 0.0
    candidate_tokens = candidate_question.lower().split()

    matches = 0
    for token in query_tokens:
        if len(token) < MIN_TOKEN_LENGTH:
            continue
        if any(token in cand or cand in token for cand in candidate_tokens):
            matches += 1

    return matches / len(query_tokens)


def retrieve(
    query: str,
    threshold: float = SUGGESTION_THRESHOLD,
    corpus: tuple[FAQEntry, ...] = FITNESS_FAQS,
) -> list[RelevanceMatch]:
    """Rank corpus entries scoring at or above threshold, best first.

    sorted() is stable, so equal scores keep corpus order.
    """
    matches = []
    for entry in corpus:
        relevance = score(query, entry.question)
        if relevance >= threshold:
            matches.append(RelevanceMatch(entry.question, entry.answer, relevance))
    return sorted(matches, key=lambda m: m.score, reverse=True)


def best_match(query: str, corpus: tuple[FAQEntry, ...] = FITNESS_FAQS) -> RelevanceMatch | None:
    matches = retrieve(query, DIRECT_MATCH_THRESHOLD, corpus)
    return matches[0] if matches else None


def direct_answer(query: str, corpus: tuple[FAQEntry, ...] = FITNESS_FAQS) -> str | None:
    """Corpus answer when the best match is strong enough, else None."""
    match = best_match(query, corpus)
    if match and match.score > DIRECT_ANSWER_MIN_SCORE:
        return match.answer
    return None


def enrich_prompt(user_message: str, corpus: tuple[FAQEntry, ...] = FITNESS_FAQS) -> str:
    """Append up to two relevant FAQ entries to the user's message.

    The user's own text is always kept intact at the front.
    """
    relevant = retrieve(user_message, ENRICHMENT_THRESHOLD, corpus)[:ENRICHMENT_LIMIT]
    if not relevant:
        return user_message

    enriched = f"{user_message}\n\n{FAQ_CONTEXT_HEADER}"
    for match in relevant:
        enriched += f"\nQ: {match.question}\nA: {match.answer}\n"
    return enriched


def suggested_questions(query: str, corpus: tuple[FAQEntry, ...] = FITNESS_FAQS) -> list[str]:
    """Up to three related FAQ questions for follow-up."""
    return [m.question for m in retrieve(query, SUGGESTION_THRESHOLD, corpus)[:SUGGESTION_LIMIT]]
