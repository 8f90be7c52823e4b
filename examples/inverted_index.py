"""
Inverted index MapReduce example.
Creates an index mapping each word to the documents it appears in.
"""

import string


def map_function(records):
    """
    Map function: emit (word, document_id) for each word.

    Args:
        records: Records of one file, each with 'doc' and 'line' fields

    Yields:
        (word, document_id) tuples
    """
    for record in records:
        words = record['line'].translate(str.maketrans('', '', string.punctuation)).split()

        for word in words:
            if word:
                yield (word.lower(), record['doc'])


SOURCES = {
    'documents': map_function,
}


def reduce_function(key, values):
    """
    Reduce function: collect the distinct documents of a word.

    Args:
        key: Word
        values: Document ids, possibly repeated and in any order

    Returns:
        Single-element list with the sorted document ids
    """
    return [sorted(set(values))]


def serialize_function(key, values):
    return [f"{key},{' '.join(docs)}" for docs in values]
