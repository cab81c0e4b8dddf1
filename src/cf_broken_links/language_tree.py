"""
Language tree for locale fallbacks.

Groups locales and country codes that share content so that a broken
``/content/dam/fr-CA/...`` reference can be tried against ``fr-FR`` and its
siblings. English roots are always tried last as a universal fallback.
"""

from typing import Optional

from .locale import FIVE_LETTER_PATTERN, TWO_LETTER_PATTERN


COUNTRY_CODE_GROUPS: dict[str, list[str]] = {
    "FR": ["FR", "MC"],
    "DE": ["DE", "AT", "LI"],
    "US": ["US", "GB", "CA", "AU", "NZ", "IE"],
    "ES": ["ES", "MX", "AR", "CO", "CL", "PE"],
    "IT": ["IT", "SM", "VA"],
    "CN": ["CN", "TW", "HK", "SG"],
    "RU": ["RU", "BY", "KZ"],
    "PT": ["PT", "BR", "AO"],
    "NL": ["NL", "BE", "SR"],
}

LOCALE_CODE_GROUPS: dict[str, list[str]] = {
    "fr-FR": ["fr-FR", "ca-FR", "fr-CA", "fr-BE", "fr-CH"],
    "de-DE": ["de-DE", "de-AT", "de-CH", "de-LI"],
    "en-US": ["en-US", "en-GB", "en-CA", "en-AU", "en-NZ"],
    "es-ES": ["es-ES", "es-MX", "es-AR", "es-CO", "es-CL"],
    "it-IT": ["it-IT", "it-CH", "it-SM"],
    "zh-CN": ["zh-CN", "zh-TW", "zh-HK", "zh-SG"],
    "ru-RU": ["ru-RU", "ru-BY", "ru-KZ"],
    "pt-PT": ["pt-PT", "pt-BR"],
    "nl-NL": ["nl-NL", "nl-BE"],
}


def _build_reverse_map(groups: dict[str, list[str]]) -> dict[str, str]:
    reverse: dict[str, str] = {}
    for root, members in groups.items():
        for member in members:
            reverse[member] = root
    return reverse


COUNTRY_TO_ROOT = _build_reverse_map(COUNTRY_CODE_GROUPS)
LOCALE_TO_ROOT = _build_reverse_map(LOCALE_CODE_GROUPS)

ENGLISH_FALLBACKS = [
    "us", "US", "en-us", "en_us", "en-US", "en_US",
    "gb", "GB", "en-gb", "en_gb", "en-GB", "en_GB",
]


def _canonical(code: str) -> str:
    """Canonical lookup form: ``FR`` or ``fr-FR``."""
    if FIVE_LETTER_PATTERN.match(code):
        return f"{code[:2].lower()}-{code[3:].upper()}"
    return code.upper()


def _render_like(code: str, template: str) -> str:
    """Render a canonical code in the casing and separator style of ``template``."""
    if FIVE_LETTER_PATTERN.match(code) and FIVE_LETTER_PATTERN.match(template):
        language = code[:2].upper() if template[:2].isupper() else code[:2].lower()
        country = code[3:].lower() if template[3:].islower() else code[3:].upper()
        return f"{language}{template[2]}{country}"
    if TWO_LETTER_PATTERN.match(code) and template.islower():
        return code.lower()
    return code


class LanguageTree:
    """Lookups over the locale and country groups."""

    @staticmethod
    def find_root_for_locale(code: Optional[str]) -> Optional[str]:
        """
        Find the group root for a locale or country code.

        Lookup ignores casing and separator style, so ``fr_ca`` resolves
        like ``fr-CA``.

        Returns:
            The root code (``fr-FR``, ``FR``), or None when the code is
            unknown.
        """
        if not code:
            return None

        canonical = _canonical(code.strip())
        if canonical in LOCALE_TO_ROOT:
            return LOCALE_TO_ROOT[canonical]
        if canonical in COUNTRY_TO_ROOT:
            return COUNTRY_TO_ROOT[canonical]
        if canonical in LOCALE_CODE_GROUPS or canonical in COUNTRY_CODE_GROUPS:
            return canonical
        return None

    @staticmethod
    def generate_case_variations(code: Optional[str]) -> list[str]:
        """
        Generate the casing and separator variations of a code.

        ``FR`` gives ``["fr"]``. ``fr-FR`` gives every lower/upper combination
        with both ``-`` and ``_`` separators. The input itself is never
        included, and unrecognized codes give an empty list.
        """
        if not code:
            return []

        if TWO_LETTER_PATTERN.match(code):
            variations = [code.lower(), code.upper()]
        elif FIVE_LETTER_PATTERN.match(code):
            language, country = code[:2], code[3:]
            variations = []
            for separator in ("-", "_"):
                variations.extend([
                    f"{language.lower()}{separator}{country.lower()}",
                    f"{language.lower()}{separator}{country.upper()}",
                    f"{language.upper()}{separator}{country.lower()}",
                    f"{language.upper()}{separator}{country.upper()}",
                ])
        else:
            return []

        return [variation for variation in variations if variation != code]

    @staticmethod
    def find_english_fallbacks() -> list[str]:
        return list(ENGLISH_FALLBACKS)

    @staticmethod
    def find_similar_language_roots(code: Optional[str]) -> list[str]:
        """
        List candidate locale codes to try in place of ``code``.

        Order: casing variations of the code, the other members of its
        language group (rendered in the same style as ``code``), then the
        English fallbacks. Duplicates and the code itself are removed.
        """
        if not code:
            return []

        candidates = LanguageTree.generate_case_variations(code)

        root = LanguageTree.find_root_for_locale(code)
        if root:
            group = LOCALE_CODE_GROUPS.get(root) or COUNTRY_CODE_GROUPS.get(root) or []
            candidates.extend(_render_like(member, code) for member in group)

        candidates.extend(LanguageTree.find_english_fallbacks())

        seen: set[str] = set()
        unique: list[str] = []
        for candidate in candidates:
            if candidate != code and candidate not in seen:
                seen.add(candidate)
                unique.append(candidate)
        return unique
