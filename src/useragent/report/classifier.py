"""Note classification behind a swappable interface.

`KeywordNoteClassifier` is the bilingual (English/Czech) keyword-table
implementation. The report builder only depends on `NoteClassifier`, so an
embedding or rule-engine classifier can replace it without touching report
assembly.
"""

from __future__ import annotations

import re
from typing import Literal, Protocol

Sentiment = Literal["negative", "positive", "neutral"]
Severity = Literal["low", "medium", "high"]

MIN_CRITERIA = 2
MAX_CRITERIA = 5

NEGATIVE_KEYWORDS: tuple[str, ...] = (
    "chybí", "není", "nejasn", "matoucí", "zmaten", "problém", "špatně", "špatný",
    "nefunguje", "broken", "fail", "error", "nelze", "nemůže", "nevidí", "schází",
    "missing", "unclear", "confus", "difficult", "hard to", "cannot", "doesn't",
    "won't", "couldn't", "shouldn't", "risk", "danger", "warning", "issue",
    "bug", "nevím", "don't know", "unsure", "uncertain", "překáž", "blokuje",
    "brání", "komplik", "složit", "těžk", "nepohodl", "frustr", "irituj",
    "otravuj", "zdržuje", "pomalý", "slow", "lag", "neočekáv", "unexpect",
    "ale ", "však", "jenže", "bohužel", "unfortunately", "could be better",
    "mohl by být", "mohlo by", "would be nice", "by se hodilo", "není vidět",
    "skryt", "malý", "small", "tiny", "hard to see", "těžko vidět", "nevýrazn",
)  # fmt: skip

POSITIVE_KEYWORDS: tuple[str, ...] = (
    "přehledn", "jednoduch", "snadný", "srozumiteln", "jasný", "clear", "easy",
    "simple", "intuitive", "intuitivn", "dobrý", "dobře", "good", "great",
    "excellent", "perfect", "výborn", "skvěl", "pěkn", "nice", "helpful",
    "užitečn", "praktick", "čiteln", "readable", "velký", "large", "visible",
    "viditeln", "funguje", "works", "working", "správně", "correctly", "properly",
    "rychl", "fast", "quick", "responzivn", "responsive", "bezpečn", "secure",
    "díky", "thanks", "rád", "glad", "happy", "pleased", "satisfied", "spokoje",
)  # fmt: skip

CONTRAST_MARKERS: tuple[str, ...] = (" ale ", " však ", ", but ")

# Each category matches when any alternative has all of its fragments present.
CATEGORY_RULES: tuple[tuple[str, tuple[tuple[str, ...], ...]], ...] = (
    ("form", (("form",), ("input",), ("field",), ("políčk",), ("formulář",))),
    ("navigation", (("navigation",), ("menu",), ("link",), ("navigac",))),
    ("performance", (("loading",), ("slow",), ("performance",), ("pomal",), ("načít",))),
    ("accessibility", (("accessibility",), ("a11y",), ("screen reader",), ("přístupnost",))),
    ("onboarding", (("onboarding",), ("registration",), ("sign up",), ("registrac",), ("vytvoř", "účet"))),
    ("copy", (("text",), ("label",), ("copy",), ("placeholder",), ("popis",), ("nápis",))),
    ("validation", (("error",), ("validation",), ("chyb",), ("validac",))),
    ("feedback", (("feedback",), ("confirm",), ("potvr",), ("zpětná vazba",))),
    ("security", (("heslo",), ("password",))),
    ("interaction", (("button",), ("tlačítko",), ("klik",))),
)
DEFAULT_CATEGORY = "ux"

HIGH_SEVERITY = ("critical", "broken", "crash", "nefunguje", "nelze", "blokuje", "cannot", "impossible")
ONBOARDING_CONFUSION = ("zmaten", "confus", "nevím", "nejasn", "neočekáv")
PASSWORD_WORDS = ("heslo", "password")
PASSWORD_RULE_GAPS = ("chybí", "missing", "není", "nevím", "požadav", "pravidl")
MEDIUM_SEVERITY = ("confus", "unclear", "missing", "zmaten", "nejasn", "chybí", "matoucí", "těžk", "komplik")

GENERIC_CRITERIA = (
    "Změna je viditelná na stránce bez nutnosti refreshe",
    "Funkčnost je ověřena manuálním testem",
)

_ADD_RE = re.compile(r"přidat\s+([^,.]+)", re.IGNORECASE)
_ADD_EN_RE = re.compile(r"add\s+([^,.]+)", re.IGNORECASE)


class NoteClassifier(Protocol):
    def sentiment(self, text: str) -> Sentiment: ...

    def category(self, text: str) -> str: ...

    def severity(self, text: str, category: str) -> Severity: ...

    def acceptance_criteria(self, text: str, category: str) -> list[str]: ...


def _has_any(text: str, fragments: tuple[str, ...]) -> bool:
    return any(fragment in text for fragment in fragments)


class KeywordNoteClassifier:
    """Keyword-table classifier for English and Czech evaluation notes."""

    def sentiment(self, text: str) -> Sentiment:
        lowered = text.lower()
        negative = sum(1 for keyword in NEGATIVE_KEYWORDS if keyword in lowered)
        positive = sum(1 for keyword in POSITIVE_KEYWORDS if keyword in lowered)

        if negative > 0 and _has_any(lowered, CONTRAST_MARKERS):
            return "negative"
        if negative > positive:
            return "negative"
        if positive > negative:
            return "positive"
        # Ties lean towards an actionable issue unless nothing matched at all.
        return "negative" if negative > 0 else "neutral"

    def category(self, text: str) -> str:
        lowered = text.lower()
        for category, alternatives in CATEGORY_RULES:
            if any(all(fragment in lowered for fragment in required) for required in alternatives):
                return category
        return DEFAULT_CATEGORY

    def severity(self, text: str, category: str) -> Severity:
        lowered = text.lower()
        if _has_any(lowered, HIGH_SEVERITY):
            return "high"
        if category == "onboarding" and _has_any(lowered, ONBOARDING_CONFUSION):
            return "medium"
        # Password rule gaps are always medium, whatever else the note says.
        if _has_any(lowered, PASSWORD_WORDS) and _has_any(lowered, PASSWORD_RULE_GAPS):
            return "medium"
        if _has_any(lowered, MEDIUM_SEVERITY):
            return "medium"
        return "low"

    def acceptance_criteria(self, text: str, category: str) -> list[str]:
        lowered = text.lower()
        criteria: list[str] = []

        if _has_any(lowered, PASSWORD_WORDS):
            if _has_any(lowered, ("chybí", "požadav", "pravidl", "nevím", "rules", "requirement")):
                criteria += [
                    'Pod polem hesla je zobrazen text s požadavky (např. "min. 8 znaků, 1 číslo")',
                    "Při psaní hesla se dynamicky zobrazuje indikátor síly (slabé/střední/silné)",
                    "Nesplněné požadavky jsou zvýrazněny červeně před odesláním formuláře",
                ]
            if _has_any(lowered, ("nevidím", "tečk", "skryt", "hidden")):
                criteria += [
                    "U pole hesla je ikona oka pro přepnutí viditelnosti",
                    "Po kliknutí na ikonu se heslo zobrazí jako čitelný text",
                ]

        if category == "form" or _has_any(lowered, ("formulář", "políčk", "input")):
            if _has_any(lowered, ("povinn", "required", "hvězdičk")):
                criteria += [
                    'Povinná pole jsou označena hvězdičkou (*) nebo textem "povinné"',
                    "Při pokusu o odeslání prázdného povinného pole se zobrazí chybová hláška",
                ]
            if _has_any(lowered, ("validac", "chyb", "validation", "error")):
                criteria += [
                    "Chybové hlášky se zobrazují přímo u příslušného pole",
                    "Text chyby jasně říká, co je špatně a jak to opravit",
                ]

        if category == "onboarding" or "registrac" in lowered:
            if _has_any(lowered, ("uvítací", "potvr", "welcome", "neočekáv")):
                criteria += [
                    'Po úspěšné registraci se zobrazí uvítací zpráva s textem "Účet byl vytvořen"',
                    "Uvítací zpráva obsahuje jméno uživatele",
                    "Novinka/promo okno se nezobrazuje ihned po registraci, ale až po zavření uvítání",
                ]
            if _has_any(lowered, ("slang", "hantýrk", "jazyk", "text")):
                criteria += [
                    "Všechny texty v UI jsou srozumitelné pro uživatele 60+",
                    "Neformální výrazy jsou nahrazeny standardním jazykem",
                ]

        if _has_any(lowered, ("malý", "small", "vidět", "nevýrazn")):
            criteria += [
                "Element má minimální velikost 44x44px (dotyková oblast)",
                "Text má minimální velikost 16px",
                "Kontrastní poměr textu vůči pozadí je min. 4.5:1",
            ]

        if category == "feedback" or _has_any(lowered, ("zpětná", "feedback")):
            criteria += [
                "Po každé uživatelské akci je viditelná odezva do 100ms",
                "Úspěšné akce jsou potvrzeny zelenou barvou nebo ikonou ✓",
            ]

        if category == "navigation":
            criteria += [
                "Odkaz je vizuálně odlišen od okolního textu (barva, podtržení)",
                "Po najetí myší se změní kurzor na pointer",
            ]

        if not criteria:
            criteria += _fallback_criteria(text, lowered)

        if len(criteria) < MIN_CRITERIA:
            criteria += GENERIC_CRITERIA
        return criteria[:MAX_CRITERIA]


def _fallback_criteria(text: str, lowered: str) -> list[str]:
    criteria: list[str] = []
    if _has_any(lowered, ("přidat", "add")):
        match = _ADD_RE.search(text) or _ADD_EN_RE.search(text)
        if match:
            what = match.group(1).strip()
            criteria += [
                f'Element "{what}" je přítomen na stránce',
                f'Element "{what}" je viditelný bez scrollování',
            ]
    if _has_any(lowered, ("zobrazit", "show", "display")):
        criteria += [
            "Informace je viditelná ihned po načtení stránky",
            "Informace je umístěna v kontextu relevantního prvku",
        ]
    return criteria
