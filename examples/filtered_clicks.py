"""
Clicks made by users from a single country.

Joins two sources that share the user id as key. Every mapped record is
tagged with a 'table' field so the reducer can tell the user record
apart from the click records in the same group.
"""

COUNTRY = 'LT'

# A click group without a user record from COUNTRY is dropped entirely.
# Set to False to keep such clicks without user fields.
DROP_UNMATCHED = True


def map_users(records):
    return [
        (record['id'], dict(record, table='users'))
        for record in records
        if record.get('country') == COUNTRY
    ]


def map_clicks(records):
    return [(record['user_id'], dict(record, table='clicks')) for record in records]


SOURCES = {
    'users': map_users,
    'clicks': map_clicks,
}


def make_join_reducer(drop_unmatched=True):
    """
    Build a reducer that merges the user record into each click record

    Args:
        drop_unmatched: Discard clicks whose group has no user record

    Returns:
        (key, values) -> list of merged click records
    """
    def join(key, values):
        user = next((value for value in values if value['table'] == 'users'), None)
        if user is None and drop_unmatched:
            return []

        clicks = [value for value in values if value['table'] == 'clicks']
        return [dict(click, **(user or {})) for click in clicks]

    return join


reduce_function = make_join_reducer(DROP_UNMATCHED)


def serialize_function(key, values):
    """Emit one 'key,field1,field2,...' line per reduced value"""
    return [",".join([str(key)] + [str(v) for v in value.values()]) for value in values]
