"""
Classic MapReduce word count example.
Counts the frequency of each word across the 'line' field of text records.
"""

import string


def map_function(records):
    """
    Map function: emit (word, 1) for each word of every line.

    Args:
        records: Records of one file, each with a 'line' field

    Yields:
        (word, 1) tuples
    """
    for record in records:
        # Remove punctuation and split into words
        words = record['line'].translate(str.maketrans('', '', string.punctuation)).split()

        for word in words:
            if word:  # Skip empty strings
                yield (word.lower(), 1)


SOURCES = {
    'text': map_function,
}


def reduce_function(key, values):
    """
    Reduce function: sum all counts for a word.

    Args:
        key: Word
        values: List of counts (all 1s from map)

    Returns:
        Single-element list with the total count
    """
    return [sum(values)]


def serialize_function(key, values):
    return [f"{key},{value}" for value in values]
