"""Predefined personas for quick runs."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PersonaPreset:
    name: str
    description: str
    persona: str
    sample_intents: tuple[str, ...]


PERSONA_PRESETS: dict[str, PersonaPreset] = {
    "elderly": PersonaPreset(
        name="Elderly User",
        description="Senior citizen with limited tech experience",
        persona=(
            "Marie, 68 let, důchodkyně, velmi špatně ovládá počítač, poprvé používá tuto stránku, "
            "má problémy s malým písmem"
        ),
        sample_intents=(
            "Chci najít kontakt na zákaznickou podporu",
            "Potřebuji najít informace o cenách",
            "Chci se zaregistrovat",
        ),
    ),
    "gen-z": PersonaPreset(
        name="Gen-Z Mobile User",
        description="Young user accustomed to modern apps",
        persona=(
            "Eliška, 19 let, studentka, používá hlavně mobil, netrpělivá, zvyklá na Instagram, TikTok "
            "a moderní aplikace"
        ),
        sample_intents=(
            "Hledám něco zajímavého",
            "Chci rychle najít hlavní funkce",
            "Potřebuji něco sdílet s kamarády",
        ),
    ),
    "designer": PersonaPreset(
        name="UX Designer",
        description="Professional critical of design and UX",
        persona="Jan, 32 let, UX designer, velmi kritický k vizuálnímu designu, konzistenci rozhraní a použitelnosti",
        sample_intents=(
            "Chci zhodnotit celkový design a použitelnost",
            "Potřebuji projít hlavní user flow",
            "Chci otestovat responzivitu a přístupnost",
        ),
    ),
    "developer": PersonaPreset(
        name="Developer",
        description="Technical user focused on performance",
        persona=(
            "Tomáš, 28 let, softwarový vývojář, zvyklý na rychlé a responzivní weby, kriticky hodnotí výkon "
            "a technickou kvalitu"
        ),
        sample_intents=(
            "Chci otestovat rychlost načítání a odezvu",
            "Potřebuji projít formuláře a validace",
            "Chci zjistit jak funguje vyhledávání",
        ),
    ),
    "accessibility": PersonaPreset(
        name="Accessibility User",
        description="User with visual impairment using assistive tech",
        persona=(
            "Pavel, 45 let, částečně nevidomý, používá zvětšovací software a čtečku obrazovky, potřebuje dobře "
            "strukturovaný obsah"
        ),
        sample_intents=(
            "Potřebuji navigovat pouze pomocí klávesnice",
            "Chci najít hlavní obsah stránky",
            "Potřebuji přečíst všechny informace",
        ),
    ),
    "business": PersonaPreset(
        name="Business User",
        description="Professional looking for efficiency",
        persona=(
            "Petra, 42 let, manažerka, má málo času, potřebuje rychle najít informace a dokončit úkoly "
            "bez zdržování"
        ),
        sample_intents=(
            "Potřebuji rychle najít ceny a podmínky",
            "Chci kontaktovat obchodní oddělení",
            "Potřebuji porovnat možnosti",
        ),
    ),
    "first-time": PersonaPreset(
        name="First-time Visitor",
        description="New user unfamiliar with the site",
        persona="Lucie, 35 let, první návštěva webu, neví co očekávat, hledá orientaci a základní informace",
        sample_intents=(
            "Chci pochopit o čem tento web je",
            "Potřebuji najít základní informace",
            "Chci vyzkoušet hlavní funkce",
        ),
    ),
    "power-user": PersonaPreset(
        name="Power User",
        description="Experienced user expecting advanced features",
        persona=(
            "Martin, 30 let, zkušený uživatel, zná podobné aplikace, očekává pokročilé funkce a klávesové zkratky"
        ),
        sample_intents=(
            "Chci najít pokročilé nastavení",
            "Potřebuji rychle ovládat pomocí klávesnice",
            "Chci využít všechny dostupné funkce",
        ),
    ),
}


def get_persona_preset(key: str) -> PersonaPreset | None:
    return PERSONA_PRESETS.get(key.strip().lower())


def list_persona_presets() -> list[str]:
    return list(PERSONA_PRESETS)
