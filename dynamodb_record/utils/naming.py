"""Table name inflection.

A record type without an explicit table name is bound to the snake_cased,
pluralized form of its class name: ``OrderItem`` -> ``order_items``.
"""

import re

_IRREGULAR = {
    'person': 'people',
    'man': 'men',
    'woman': 'women',
    'child': 'children',
    'tooth': 'teeth',
    'foot': 'feet',
    'mouse': 'mice',
    'goose': 'geese',
    'ox': 'oxen',
    'leaf': 'leaves',
    'life': 'lives',
    'knife': 'knives',
    'wife': 'wives',
    'half': 'halves',
    'criterion': 'criteria',
    'analysis': 'analyses',
    'status': 'statuses',
    'index': 'indices',
    'matrix': 'matrices',
    'vertex': 'vertices',
}

_UNCOUNTABLE = {
    'audio', 'data', 'equipment', 'feedback', 'fish', 'information', 'metadata',
    'money', 'news', 'rice', 'series', 'sheep', 'species', 'traffic',
}

_CAMEL_BOUNDARY = re.compile(r'(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])')


def snake_case(name: str) -> str:
    """Convert a CamelCase or mixedCase name to snake_case."""
    name = _CAMEL_BOUNDARY.sub('_', name)
    return re.sub(r'[\s\-]+', '_', name).lower()


def pluralize(word: str) -> str:
    """Return the English plural of a single lower-case word."""
    if not word or word in _UNCOUNTABLE:
        return word
    if word in _IRREGULAR:
        return _IRREGULAR[word]
    if re.search(r'(s|x|z|ch|sh)$', word):
        return word + 'es'
    if re.search(r'[^aeiou]y$', word):
        return word[:-1] + 'ies'
    return word + 's'


def table_name_for(class_name: str) -> str:
    """Derive the default table name for a record class name.

    Only the last word is pluralized, matching ``OrderItem`` -> ``order_items``.
    """
    parts = snake_case(class_name).split('_')
    parts[-1] = pluralize(parts[-1])
    return '_'.join(parts)
