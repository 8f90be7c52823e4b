"""
Total clicks per day.
Reads click records (date,user_id,...) and counts clicks for every date.
"""

SOURCES = {
    'clicks': lambda records: [(record['date'], record) for record in records],
}


def reduce_function(key, values):
    """
    Reduce function: count the clicks of one date.

    Args:
        key: Date
        values: Click records for that date

    Returns:
        Single-element list with the click total
    """
    return [{'total_clicks': str(len(values))}]


def serialize_function(key, values):
    """Emit one 'key,field1,field2,...' line per reduced value"""
    return [",".join([str(key)] + list(value.values())) for value in values]
