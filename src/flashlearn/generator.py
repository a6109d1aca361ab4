"""
Test question generation.

Questions come from the AI gateway when it is configured and reachable, and
from a local generator otherwise.
"""
import json
import logging
import random
import re
from typing import Optional

import requests

from flashlearn import config
from flashlearn.errors import GenerationError
from flashlearn.models import Card, Question

logger = logging.getLogger(__name__)

QUESTION_TYPES = ("multiple_choice", "true_false", "fill_blank")
MAX_QUESTIONS = 40

SYSTEM_PROMPT = (
    "You are a helpful study assistant that generates educational questions. "
    "Always respond with valid JSON."
)

_JSON_ARRAY = re.compile(r"\[[\s\S]*\]")


def build_prompt(cards: list[Card], question_types, count: int) -> str:
    card_text = "\n\n".join(f"Term: {c.term}\nDefinition: {c.definition}" for c in cards)
    return (
        f"Generate {count} diverse study questions from these flashcards:\n"
        f"{card_text}\n\n"
        f"Question types to include: {', '.join(question_types)}\n\n"
        "For each question, provide:\n"
        "1. question_type (multiple_choice, true_false, or fill_blank)\n"
        "2. question_text\n"
        "3. correct_answer\n"
        "4. options (for multiple_choice, array of 4 options including correct answer)\n"
        "5. explanation\n\n"
        "Return as JSON array."
    )


def parse_questions(text: str) -> list[Question]:
    """
    Pull the first JSON array out of a model reply.

    Anything that is not a well-formed question object is dropped; a reply
    with no parseable array yields an empty list.
    """
    match = _JSON_ARRAY.search(text) if isinstance(text, str) else None
    if not match:
        logger.warning("AI response contained no JSON array")
        return []
    try:
        raw = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        logger.warning("Failed to parse AI response: %s", e)
        return []

    questions = []
    for item in raw if isinstance(raw, list) else []:
        if not isinstance(item, dict):
            continue
        question_text = item.get("question_text")
        correct_answer = item.get("correct_answer")
        if not question_text or correct_answer is None:
            continue
        options = item.get("options") or []
        if not isinstance(options, list):
            options = []
        question_type = item.get("question_type")
        if question_type not in QUESTION_TYPES:
            question_type = "multiple_choice" if options else "fill_blank"
        questions.append(Question(
            question_type=question_type,
            question_text=str(question_text),
            correct_answer=str(correct_answer),
            options=[str(o) for o in options],
            explanation=str(item.get("explanation") or ""),
        ))
    return questions


def generate_questions(cards: list[Card], question_types, count: int,
                       api_key: Optional[str] = None, url: Optional[str] = None,
                       model: Optional[str] = None) -> list[Question]:
    """
    Ask the AI gateway for ``count`` questions about ``cards``.

    Raises:
        GenerationError: no API key configured, or the request failed
    """
    api_key = api_key if api_key is not None else config.AI_API_KEY
    if not api_key:
        raise GenerationError("AI gateway API key not configured")

    payload = {
        "model": model or config.AI_MODEL,
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": build_prompt(cards, question_types, count)},
        ],
    }
    try:
        response = requests.post(
            url or config.AI_GATEWAY_URL,
            json=payload,
            headers={"Authorization": f"Bearer {api_key}", "Content-Type": "application/json"},
            timeout=config.AI_TIMEOUT,
        )
        response.raise_for_status()
    except requests.exceptions.RequestException as e:
        logger.error("AI gateway request failed: %s", e)
        raise GenerationError(f"AI gateway request failed: {e}") from e

    try:
        data = response.json()
    except ValueError as e:
        logger.warning("AI gateway returned non-JSON body: %s", e)
        return []

    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        logger.warning("AI gateway response missing choices/message content")
        return []
    return parse_questions(content)


def _shuffled(items, rng: random.Random) -> list:
    items = list(items)
    rng.shuffle(items)
    return items


def local_questions(selected: list[Card], all_cards: list[Card], question_types,
                    rng: random.Random) -> list[Question]:
    """Build questions straight from the cards, one per selected card."""
    question_types = list(question_types)
    questions = []
    for card in selected:
        question_type = rng.choice(question_types)
        others = [c for c in all_cards if c.id != card.id]

        if question_type == "multiple_choice":
            wrong = [c.definition for c in _shuffled(others, rng)[:3]]
            questions.append(Question(
                question_type="multiple_choice",
                question_text=f'What is the definition of "{card.term}"?',
                correct_answer=card.definition,
                options=_shuffled([card.definition] + wrong, rng),
                explanation=f"The correct definition is: {card.definition}",
            ))
        elif question_type == "true_false":
            is_true = rng.random() > 0.5
            shown = card.definition if is_true or not others else others[0].definition
            answer = "True" if is_true else "False"
            questions.append(Question(
                question_type="true_false",
                question_text=f'True or False: "{card.term}" means "{shown}"',
                correct_answer=answer,
                options=["True", "False"],
                explanation=f"The correct answer is {answer}. {card.term} means {card.definition}",
            ))
        else:
            questions.append(Question(
                question_type="fill_blank",
                question_text=f"Define: {card.term}",
                correct_answer=card.definition,
                explanation=f"The correct definition is: {card.definition}",
            ))
    return questions


def build_test(cards: list[Card], question_types, question_count: int, use_ai: bool = True,
               rng: random.Random | None = None) -> tuple[list[Question], str]:
    """
    Pick cards and build a test from them.

    Returns ``(questions, source)`` where source is ``"ai"`` or ``"local"``.
    """
    question_types = [t for t in question_types if t in QUESTION_TYPES]
    if not question_types:
        raise ValueError("Please select at least one question type")
    rng = rng if rng is not None else random.Random()

    count = min(question_count, len(cards), MAX_QUESTIONS)
    selected = _shuffled(cards, rng)[:count]

    if use_ai:
        try:
            questions = generate_questions(selected, question_types, count)
            if questions:
                return questions, "ai"
            logger.warning("AI gateway returned no usable questions, using local generator")
        except GenerationError as e:
            logger.warning("AI generation failed, using local questions: %s", e)

    return local_questions(selected, cards, question_types, rng), "local"
