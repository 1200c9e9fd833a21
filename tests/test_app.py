import math

import pytest

from app import _parse_number, create_app, parse_form
from projection import InvalidInput
from settings import settings_keys


RATE_FORM = {
    'equitySwap': '50',
    'hoursPerWeek': '20',
    'weeksPerYear': '30',
    'hourlyRate': '100',
    'shareValue': '10',
    'optionStrikePrice': '4',
    'dividendRate': '5',
    'growthRate': '20',
}


@pytest.fixture
def client(store):
    app = create_app(store)
    app.config['TESTING'] = True
    return app.test_client()


@pytest.mark.parametrize('text, expected', [
    ('42', 42.0), ('  7.5 ', 7.5), ('1e3', 1000.0), ('', 0.0), (None, 0.0),
])
def test_parse_number(text, expected):
    assert _parse_number(text) == expected


@pytest.mark.parametrize('text', ['ten', '1,200', '$5'])
def test_parse_number_unparseable_is_nan(text):
    assert math.isnan(_parse_number(text))


def test_parse_form_rejects_nan():
    with pytest.raises(InvalidInput):
        parse_form(dict(RATE_FORM, hourlyRate='ten'), 'rate')


def test_parse_form_missing_fields_use_defaults():
    inputs = parse_form({'equitySwap': '25'}, 'flat')
    assert inputs.equity_swap_percent == 25
    assert inputs.hours_per_week == 20
    assert inputs.dividend_per_share == 1
    assert inputs.dividend_mode == 'flat'


def test_get_renders_defaults(client):
    resp = client.get('/')
    assert resp.status_code == 200
    html = resp.get_data(as_text=True)
    assert 'Equity-Cash Swap Calculator' in html
    assert '$60,000 / year' in html
    assert 'data:image/png;base64,' in html
    assert 'name="growthRate"' in html
    assert 'name="dividendPerShare"' not in html


def test_get_does_not_persist(client, store):
    client.get('/')
    assert store.data == {}


def test_get_uses_stored_values(store):
    store.set('equitySwap', 50)
    client = create_app(store).test_client()
    html = client.get('/').get_data(as_text=True)
    assert '3,000' in html
    assert '$12,000 / year' in html


def test_post_persists_every_key(client, store):
    resp = client.post('/', data=RATE_FORM)
    assert resp.status_code == 200
    assert set(store.data) == set(settings_keys('rate'))
    assert store.data['equitySwap'] == '50'
    html = resp.get_data(as_text=True)
    assert '$30,000 / year' in html
    assert '$43,500 / year' in html


def test_post_shows_projection_table(client):
    html = client.post('/', data=RATE_FORM).get_data(as_text=True)
    assert '6,000' in html        # options held in year 1
    assert '$3,600' in html       # year 1 dividends
    assert 'class="break-even"' in html


def test_post_zero_is_kept(client, store):
    client.post('/', data=dict(RATE_FORM, equitySwap='0'))
    assert store.data['equitySwap'] == '0'


def test_invalid_post_returns_400_and_persists_nothing(client, store):
    resp = client.post('/', data=dict(RATE_FORM, shareValue='0'))
    assert resp.status_code == 400
    assert 'Share value must not be zero' in resp.get_data(as_text=True)
    assert store.data == {}


def test_unparseable_post_keeps_submitted_text(client):
    resp = client.post('/', data=dict(RATE_FORM, hourlyRate='lots'))
    assert resp.status_code == 400
    html = resp.get_data(as_text=True)
    assert 'value="lots"' in html
    assert 'Hourly rate must be a finite number' in html


def test_flat_entry_point(client, store):
    form = {k: v for k, v in RATE_FORM.items() if k not in ('dividendRate', 'growthRate')}
    form['dividendPerShare'] = '1'
    resp = client.post('/flat', data=form)
    assert resp.status_code == 200
    html = resp.get_data(as_text=True)
    assert 'name="dividendPerShare"' in html
    assert 'name="growthRate"' not in html
    # 3,000 options x $1
    assert '$45,000 / year' in html
    assert set(store.data) == set(settings_keys('flat'))


def test_form_allows_typing_outside_slider_range(client, store):
    assert 'novalidate' in client.get('/').get_data(as_text=True)
    resp = client.post('/', data=dict(RATE_FORM, equitySwap='90'))
    assert resp.status_code == 200
    assert store.data['equitySwap'] == '90'
    # 90% of $60,000 at $10/share
    assert '5,400' in resp.get_data(as_text=True)


def test_post_with_billing_beyond_int64(client, store):
    resp = client.post('/', data={'equitySwap': '50', 'hourlyRate': '1e17'})
    assert resp.status_code == 200
    assert '$30,000,000,000,000,000,000 / year' in resp.get_data(as_text=True)
    assert store.data['hourlyRate'] == '100000000000000000'


def test_post_overflowing_results_returns_400(client, store):
    resp = client.post('/', data=dict(RATE_FORM, shareValue='1e-320'))
    assert resp.status_code == 400
    assert 'too large' in resp.get_data(as_text=True)
    assert store.data == {}


def test_get_with_overflowing_stored_values_returns_400(store):
    store.set('equitySwap', 50)
    store.set('shareValue', 1e-320)
    resp = create_app(store).test_client().get('/')
    assert resp.status_code == 400
    assert 'too large' in resp.get_data(as_text=True)


def test_share_value_column_only_in_rate_mode(client):
    assert '<th>Share value</th>' in client.post('/', data=RATE_FORM).get_data(as_text=True)
    flat_html = client.post('/flat', data={'equitySwap': '50'}).get_data(as_text=True)
    assert '<th>Share value</th>' not in flat_html
    assert '<th>Options held</th>' in flat_html
