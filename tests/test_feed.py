from datetime import timedelta

import pytest

from ressly.core.errors import ValidationError
from ressly.models.base import utc_now
from ressly.services.feed_service import FeedWindow, list_community_feed, parse_window, window_start


def _feed(client, residential_id, **params):
    response = client.get(f"/api/v1/reports/community/{residential_id}", params=params)
    assert response.status_code == 200
    return response.json()


def test_feed_orders_by_votes_then_newest(client, community, make_report, add_vote):
    now = utc_now()
    top = make_report(community.alice, title='top', created_at=now - timedelta(days=3))
    tie_old = make_report(community.bob, title='tie-old', created_at=now - timedelta(days=2))
    tie_new = make_report(community.carol, title='tie-new', created_at=now - timedelta(days=1))
    bottom = make_report(community.alice, title='bottom', created_at=now)

    add_vote(top, community.alice, 1)
    add_vote(top, community.bob, 1)
    add_vote(tie_old, community.carol, 1)
    add_vote(tie_old, community.bob, -1)
    add_vote(bottom, community.carol, -1)

    entries = _feed(client, community.residential_id)
    assert [entry['id'] for entry in entries] == [top, tie_new, tie_old, bottom]
    assert [entry['vote_count'] for entry in entries] == [2, 0, 0, -1]


def test_feed_only_public_reports_of_the_residential(client, community, make_report):
    visible = make_report(community.alice)
    make_report(community.bob, public=False)
    make_report(community.outsider)

    entries = _feed(client, community.residential_id)
    assert [entry['id'] for entry in entries] == [visible]

    other = _feed(client, community.other_residential_id)
    assert len(other) == 1
    assert other[0]['first_name'] == 'Dave'


def test_feed_time_windows(client, community, make_report):
    now = utc_now()
    recent = make_report(community.alice, created_at=now - timedelta(days=2))
    this_month = make_report(community.alice, created_at=now - timedelta(days=20))
    old = make_report(community.alice, created_at=now - timedelta(days=45))

    assert {entry['id'] for entry in _feed(client, community.residential_id, window='week')} == {recent}
    assert {entry['id'] for entry in _feed(client, community.residential_id, window='month')} == {
        recent,
        this_month,
    }
    assert {entry['id'] for entry in _feed(client, community.residential_id, window='all')} == {
        recent,
        this_month,
        old,
    }
    assert {entry['id'] for entry in _feed(client, community.residential_id, window='semana')} == {recent}
    assert len(_feed(client, community.residential_id)) == 3


def test_feed_rejects_unknown_window(client, community):
    response = client.get(
        f"/api/v1/reports/community/{community.residential_id}",
        params={'window': 'year'},
    )
    assert response.status_code == 400
    assert response.json()['error'] == 'invalid_time_window'


def test_feed_requires_residential(client):
    response = client.get('/api/v1/reports/community/%20')
    assert response.status_code == 400
    assert response.json()['error'] == 'missing_field'


def test_feed_hides_author_of_anonymous_reports(client, community, make_report):
    hidden = make_report(community.alice, title='anonymous one', anonymous=True, created_at=utc_now())
    shown = make_report(community.alice, title='signed one', created_at=utc_now() - timedelta(hours=1))

    entries = {entry['id']: entry for entry in _feed(client, community.residential_id)}

    anonymous = entries[hidden]
    assert anonymous['first_name'] is None
    assert anonymous['last_name'] is None
    assert anonymous['resident_photo_url'] is None
    assert anonymous['resident_id'] is None
    assert anonymous['title'] == 'anonymous one'
    assert anonymous['images']

    signed = entries[shown]
    assert signed['first_name'] == 'Alice'
    assert signed['last_name'] == 'Ramos'
    assert signed['resident_photo_url'] == 'https://images.test/residents/alice.jpg'
    assert signed['resident_id'] == community.alice


def test_feed_reports_callers_own_vote(client, community, make_report, add_vote):
    liked = make_report(community.alice, created_at=utc_now() - timedelta(hours=2))
    disliked = make_report(community.alice, created_at=utc_now() - timedelta(hours=1))
    untouched = make_report(community.alice)
    add_vote(liked, community.bob, 1)
    add_vote(disliked, community.bob, -1)
    add_vote(untouched, community.carol, 1)

    entries = {entry['id']: entry for entry in _feed(client, community.residential_id, voter=community.bob)}
    assert entries[liked]['user_vote'] == 1
    assert entries[disliked]['user_vote'] == -1
    assert entries[untouched]['user_vote'] is None

    anonymous_caller = _feed(client, community.residential_id)
    assert all(entry['user_vote'] is None for entry in anonymous_caller)


def test_feed_images_keep_display_order(session, community, make_report):
    report_id = make_report(community.alice, images=4)
    entries = list_community_feed(session, community.residential_id)
    assert entries[0].images == [f"https://images.test/reports/{report_id}-{index}.jpg" for index in range(4)]


@pytest.mark.parametrize(
    ('raw', 'expected'),
    [(None, FeedWindow.ALL), ('', FeedWindow.ALL), ('WEEK', FeedWindow.WEEK), ('mes', FeedWindow.MONTH),
     ('todas', FeedWindow.ALL)],
)
def test_parse_window(raw, expected):
    assert parse_window(raw) is expected


def test_parse_window_rejects_unknown():
    with pytest.raises(ValidationError):
        parse_window('fortnight')


def test_window_start():
    now = utc_now()
    assert window_start(FeedWindow.ALL, now) is None
    assert window_start(FeedWindow.WEEK, now) == now - timedelta(days=7)
    assert window_start(FeedWindow.MONTH, now) == now - timedelta(days=30)
