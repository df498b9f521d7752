"""Curated keyword dictionaries for the manifesto analysis.

This module centralizes the housing policy dictionary and the list of
non-sentiment terms removed from the sentiment lexicon before scoring.
Editing these lists changes which sentences are flagged as housing-related
and which lexicon entries contribute to sentiment scores.

Guidelines for updates:
- Terms are glob patterns: ``*`` matches any suffix (e.g. 'homeless*')
- Multi-word phrases are matched as contiguous tokens (e.g. 'social hous*')
- Keep patterns lowercase; matching is case-normalized anyway
- List inflections explicitly where a stem overmatches ('rent*' would also
  catch 'rentier')
"""

HOUSING_DICTIONARY: dict[str, list[str]] = {
    "housing": [
        "hous*",
        "home",
        "homes",
        "homeless*",
        "homeowner*",
        "home ownership",
        "rent",
        "rents",
        "rented",
        "renter*",
        "renting",
        "rental*",
        "tenant*",
        "tenanc*",
        "landlord*",
        "mortgage*",
        "first-time buyer*",
        "first time buyer*",
        "help-to-buy",
        "help to buy",
        "dwelling*",
        "apartment*",
        "accommodation",
        "social housing",
        "affordable hous*",
        "cost rental",
        "vacant propert*",
        "dereliction",
        "derelict",
        "residential tenancies board",
        "approved housing bod*",
        "housing assistance payment",
        "rebuilding ireland",
    ],
}


# Lexicon entries that carry policy content rather than sentiment in
# manifesto language and are dropped before scoring.
SENTIMENT_EXCLUDED_TERMS: list[str] = [
    "care",
    "caring",
    "support*",
    "welfare",
    "benefit*",
    "security",
    "secure",
    "protect*",
    "affordab*",
    "social",
    "fair",
    "fairly",
    "justice",
    "right",
    "rights",
    "crisis",
    "poverty",
    "disabilit*",
    "disabled",
    "emergency",
    "tax*",
]
