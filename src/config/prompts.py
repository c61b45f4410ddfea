"""Prompt templates for botanical fact-sheet generation.

One template per locale.  The wording differs; the JSON keys do not.  The
key list in each template must stay in sync with
:class:`src.models.plant.DetailSheet`.  The normaliser drops any key the
model invents and nulls any key it forgets, so drift here silently loses
data rather than failing.
"""

from __future__ import annotations

from src.models.plant import Locale

SYSTEM_PROMPTS: dict[Locale, str] = {
    Locale.EN: "You are a botanical expert. You always answer with a single JSON object.",
    Locale.FR: "Tu es un expert botaniste. Tu réponds toujours avec un seul objet JSON.",
}

_EN_TEMPLATE = """\
Give me detailed and useful information about the plant "{species}" in English.

Answer in JSON format with the following fields:
{{
  "common_name": "the most common name in English, only one name, no bracket, if no common name, return the scientific name",
  "scientific_name": "scientific name",
  "easy": "1 to 3",
  "exposure": "detailed exposure information",
  "exposure_tag": "ULTRA SHORT exposure tag (1-2 words max like 'Full sun', 'Partial shade', 'Indirect light')",
  "water": "watering advice",
  "family": "botanical family",
  "description": "detailed plant description",
  "watering": "watering tips",
  "care": "care tips",
  "growth": "growth type and size",
  "flowering": "flowering period if applicable",
  "resistance": "cold, drought resistance, etc.",
  "temperature": "recommended temperature",
  "multiplication": "multiplication methods",
  "diseases": "possible diseases and what to watch out for",
  "advice": ["practical tips for gardeners, max 5 tips"],
  "interest": "ornamental or utility interest",
  "toxicity": "plant toxicity description",
  "frequency": "how often to water, e.g. 'every 7 days'",
  "origin": "plant origin (continent), no brackets, just the continent name"
}}

Be precise, concise, practical and useful for amateur gardeners. \
Use the common name to talk about the plant in general."""

_FR_TEMPLATE = """\
Donne-moi des informations détaillées et utiles sur la plante "{species}" en français.

Réponds au format JSON avec les champs suivants (utilise les clés en anglais) :
{{
  "common_name": "le nom commun en français le plus connu, un seul nom, pas de parenthèse, si pas de nom commun, retourne le nom scientifique",
  "scientific_name": "nom scientifique",
  "easy": "de 1 à 3",
  "exposure": "informations détaillées sur l'exposition",
  "exposure_tag": "TAG ULTRA COURT d'exposition (1-2 mots max comme 'Plein soleil', 'Mi-ombre', 'Lumière indirecte')",
  "water": "conseil sur l'arrosage",
  "family": "famille botanique",
  "description": "description détaillée de la plante",
  "watering": "conseils d'arrosage",
  "care": "conseils d'entretien",
  "growth": "type de croissance et taille",
  "flowering": "période de floraison si applicable",
  "resistance": "résistance au froid, sécheresse, etc.",
  "temperature": "température recommandée",
  "multiplication": "méthodes de multiplication",
  "diseases": "maladies possibles et à quoi faire attention",
  "advice": ["conseils pratiques pour les jardiniers, 5 conseils maximum"],
  "interest": "intérêt ornemental ou utilitaire",
  "toxicity": "description de la toxicité de la plante",
  "frequency": "fréquence d'arrosage, par exemple 'tous les 7 jours'",
  "origin": "origine de la plante (continent), pas de parenthèse, juste le nom du continent"
}}

Sois précis, concis, pratique et utile pour un jardinier amateur. \
Utilise le nom commun pour parler de la plante en général."""

_TEMPLATES: dict[Locale, str] = {
    Locale.EN: _EN_TEMPLATE,
    Locale.FR: _FR_TEMPLATE,
}


def build_detail_prompt(species_id: str, locale: Locale) -> str:
    """Render the user prompt asking for *species_id*'s fact sheet in *locale*."""
    return _TEMPLATES[locale].format(species=species_id)
