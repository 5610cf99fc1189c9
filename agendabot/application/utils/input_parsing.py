from __future__ import annotations

import re
import unicodedata

from agendabot.application.exceptions import ValidationError

NAME_PATTERN = re.compile(r"^[a-zA-ZÀ-ÿ\s']+$")
NAME_PREFIX = re.compile(r"^\s*meu\s+nome\s+[ée]\s*", re.IGNORECASE)
EMAIL_PATTERN = re.compile(r"([\w.-]+@[\w.-]+\.[a-zA-Z]{2,})", re.IGNORECASE)
PHONE_PATTERN = re.compile(r"(?<!\d)(\d{10,15})(?!\d)")
DIGIT_SEPARATORS = re.compile(r"(?<=\d)[\s().-]+(?=\d)")
CHOICE_PATTERN = re.compile(r"^\s*(\d+)")

YES_ANSWERS = ("sim",)
NO_ANSWERS = ("não", "nao")
CANCEL_WORDS = ("cancelar", "sair")

NAME_EXAMPLE = "Meu nome é João Silva"
EMAIL_EXAMPLE = "Meu e-mail é exemplo@dominio.com"
PHONE_EXAMPLE = "Meu telefone é 61999458613"


def normalize_answer(text: str) -> str:
    return unicodedata.normalize("NFC", text or "").strip().lower()


def parse_choice(text: str) -> int:
    match = CHOICE_PATTERN.match(text or "")
    if not match:
        raise ValidationError("Expected a number")
    return int(match.group(1))


def parse_name(text: str) -> str:
    candidate = unicodedata.normalize("NFC", (text or "").strip())
    if not candidate or not NAME_PATTERN.match(candidate):
        raise ValidationError("Invalid name", example=NAME_EXAMPLE)
    name = re.sub(r"\s+", " ", NAME_PREFIX.sub("", candidate)).strip()
    if not name:
        raise ValidationError("Invalid name", example=NAME_EXAMPLE)
    return name


def parse_email(text: str) -> str:
    match = EMAIL_PATTERN.search(text or "")
    if not match:
        raise ValidationError("Invalid email", example=EMAIL_EXAMPLE)
    return match.group(1).strip()


def parse_phone(text: str) -> str:
    compact = DIGIT_SEPARATORS.sub("", text or "")
    match = PHONE_PATTERN.search(compact)
    if not match:
        raise ValidationError("Invalid phone", example=PHONE_EXAMPLE)
    return match.group(1)


def is_yes(text: str) -> bool:
    return normalize_answer(text) in YES_ANSWERS


def is_no(text: str) -> bool:
    return normalize_answer(text) in NO_ANSWERS


def is_cancel_request(text: str) -> bool:
    return normalize_answer(text) in CANCEL_WORDS
