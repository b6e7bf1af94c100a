from __future__ import annotations

from urllib.parse import quote_plus

import pytest
import requests

from census_population.domain.models import GeographyKind
from census_population.errors import FormatError, TransportError
from census_population.fetchers.geography import (
    GEOGRAPHY_SPECS,
    GeographyFetcher,
    decode_table,
    fetch_counties,
    fetch_states,
)
from tests.fakes import (
    COUNTY_HEADER,
    FAKE_API_BASE_URL,
    STATE_HEADER,
    FakeResponse,
    FakeSession,
    county_route,
    json_response,
    state_route,
)

STATE_MIN_COLUMNS = 3
COUNTY_MIN_COLUMNS = 4


def test_spec_widths_match_code_columns():
    assert GEOGRAPHY_SPECS[GeographyKind.STATE].min_columns == STATE_MIN_COLUMNS
    assert GEOGRAPHY_SPECS[GeographyKind.COUNTY].min_columns == COUNTY_MIN_COLUMNS


def test_fetch_states_builds_records_in_source_order(fake_session, test_settings):
    states = fetch_states(session=fake_session, settings=test_settings)

    assert [s.identifier for s in states] == ["01", "02"]
    assert [s.name for s in states] == ["Alabama", "Alaska"]
    assert [s.population for s in states] == ["5000000", "700000"]
    assert all(s.kind is GeographyKind.STATE for s in states)


def test_fetch_states_sends_expected_query(fake_session, test_settings):
    fetch_states(session=fake_session, settings=test_settings)

    (call,) = fake_session.calls
    assert call.url == FAKE_API_BASE_URL
    assert call.params == {"get": "NAME,B01003_001E", "for": "state:*"}
    assert call.timeout is None


def test_fetch_states_skips_short_rows(test_settings):
    session = FakeSession(
        {
            state_route(): json_response(
                [
                    STATE_HEADER,
                    ["Alabama", "5000000", "01"],
                    ["annotation row"],
                    ["Alaska", "700000"],
                    ["Arizona", "7000000", "04"],
                    [],
                ]
            )
        }
    )

    states = fetch_states(session=session, settings=test_settings)

    assert [s.identifier for s in states] == ["01", "04"]


def test_header_row_is_always_discarded(test_settings):
    # Even a header that looks like data is dropped.
    session = FakeSession({state_route(): json_response([["Texas", "1", "48"]])})

    assert fetch_states(session=session, settings=test_settings) == []


def test_fetch_counties_concatenates_codes_and_strips_names(test_settings):
    session = FakeSession(
        {
            county_route("01"): json_response(
                [
                    COUNTY_HEADER,
                    ["Autauga County, Alabama  ", "55000", "01", "001"],
                    ["  Baldwin County, Alabama", "230000", "01", "003"],
                ]
            )
        }
    )

    counties = fetch_counties("01", session=session, settings=test_settings)

    assert [c.identifier for c in counties] == ["01001", "01003"]
    assert [c.name for c in counties] == ["Autauga County, Alabama", "Baldwin County, Alabama"]
    assert all(c.kind is GeographyKind.COUNTY for c in counties)
    assert session.calls[0].params == {
        "get": "NAME,B01003_001E",
        "for": "county:*",
        "in": "state:01",
    }


def test_fetch_counties_skips_rows_without_county_column(test_settings):
    session = FakeSession(
        {
            county_route("02"): json_response(
                [
                    COUNTY_HEADER,
                    ["Anchorage Municipality, Alaska", "290000", "02"],
                    ["Bethel Census Area, Alaska", "18000", "02", "050"],
                ]
            )
        }
    )

    counties = fetch_counties("02", session=session, settings=test_settings)

    assert [c.identifier for c in counties] == ["02050"]


def test_state_names_are_kept_verbatim(test_settings):
    session = FakeSession({state_route(): json_response([STATE_HEADER, [" Ohio ", "1", "39"]])})

    (state,) = fetch_states(session=session, settings=test_settings)

    assert state.name == " Ohio "


def test_null_population_becomes_empty_string(test_settings):
    session = FakeSession(
        {state_route(): json_response([STATE_HEADER, ["Puerto Rico", None, "72"]])}
    )

    (state,) = fetch_states(session=session, settings=test_settings)

    assert state.population == ""


def test_rows_with_blank_codes_are_skipped(test_settings):
    session = FakeSession(
        {
            county_route("01"): json_response(
                [COUNTY_HEADER, ["", "1", "01", "001"], ["X County", "2", "", ""]]
            )
        }
    )

    assert fetch_counties("01", session=session, settings=test_settings) == []


def test_population_text_is_not_reformatted(test_settings):
    session = FakeSession(
        {state_route(): json_response([STATE_HEADER, ["Wyoming", "00576851", "56"]])}
    )

    (state,) = fetch_states(session=session, settings=test_settings)

    assert state.population == "00576851"


@pytest.mark.parametrize(
    "body",
    [
        b"<html>Service Unavailable</html>",
        b'{"error": "bad"}',
        b'["NAME", "B01003_001E"]',
        b'[["NAME"], [1, 2, 3]]',
        b"",
    ],
)
def test_malformed_body_raises_format_error(test_settings, body):
    session = FakeSession({state_route(): FakeResponse(200, body)})

    with pytest.raises(FormatError) as excinfo:
        fetch_states(session=session, settings=test_settings)

    assert "for=state" in excinfo.value.url


def test_connection_failure_raises_transport_error(test_settings):
    session = FakeSession({county_route("06"): requests.ConnectionError("name resolution failed")})

    with pytest.raises(TransportError) as excinfo:
        fetch_counties("06", session=session, settings=test_settings)

    assert "name resolution failed" in str(excinfo.value)
    assert isinstance(excinfo.value.__cause__, requests.ConnectionError)


def test_http_error_status_raises_transport_error(test_settings):
    session = FakeSession({state_route(): FakeResponse(503, b"")})

    with pytest.raises(TransportError):
        fetch_states(session=session, settings=test_settings)


SECRET_KEY = "s3cr3t/key+="


def _server_error_with_key_in_url() -> requests.Response:
    response = requests.Response()
    response.status_code = 500
    response.reason = "Internal Server Error"
    response._content = b""
    response.url = requests.Request(
        "GET",
        FAKE_API_BASE_URL,
        params={"get": "NAME,B01003_001E", "key": SECRET_KEY, "for": "state:*"},
    ).prepare().url
    return response


def test_api_key_is_sent_but_kept_out_of_http_errors(test_settings):
    settings = test_settings.model_copy(update={"api_key": SECRET_KEY})
    session = FakeSession({state_route(): _server_error_with_key_in_url()})

    with pytest.raises(TransportError) as excinfo:
        fetch_states(session=session, settings=settings)

    message = str(excinfo.value)
    assert session.calls[0].params["key"] == SECRET_KEY
    assert "500 Server Error" in message
    assert SECRET_KEY not in message
    assert quote_plus(SECRET_KEY) not in message
    assert "key=***" in message


def test_api_key_is_kept_out_of_connection_errors(test_settings):
    settings = test_settings.model_copy(update={"api_key": SECRET_KEY})
    leaked = requests.ConnectionError(
        f"Max retries exceeded with url: /data?key={quote_plus(SECRET_KEY)}&for=state%3A%2A"
    )
    session = FakeSession({state_route(): leaked})

    with pytest.raises(TransportError) as excinfo:
        fetch_states(session=session, settings=settings)

    assert quote_plus(SECRET_KEY) not in str(excinfo.value)
    assert "Max retries exceeded" in str(excinfo.value)


@pytest.mark.parametrize("base_url", ["census.test/data", "http:///data"])
def test_invalid_base_url_raises_transport_error(test_settings, fake_session, base_url):
    settings = test_settings.model_copy(update={"api_base_url": base_url})

    with pytest.raises(TransportError) as excinfo:
        fetch_states(session=fake_session, settings=settings)

    assert excinfo.value.url == base_url
    assert fake_session.calls == []


def test_configured_timeout_is_passed_to_session(fake_session, test_settings):
    settings = test_settings.model_copy(update={"request_timeout_seconds": 30.0})

    fetch_states(session=fake_session, settings=settings)

    assert fake_session.calls[0].timeout == 30.0


def test_county_query_requires_parent(fake_session, test_settings):
    fetcher = GeographyFetcher(GeographyKind.COUNTY, session=fake_session, settings=test_settings)

    with pytest.raises(ValueError):
        fetcher.fetch()


def test_fetcher_opens_its_own_session_when_none_given(monkeypatch, fake_session, test_settings):
    from contextlib import contextmanager

    from census_population.fetchers import geography

    @contextmanager
    def fake_open_session():
        yield fake_session
        fake_session.close()

    monkeypatch.setattr(geography, "open_session", fake_open_session)

    states = fetch_states(settings=test_settings)

    assert len(states) == 2
    assert fake_session.closed is True


def test_decode_table_returns_typed_rows():
    rows = decode_table(b'[["h1","h2"],["a","b"],["c",null]]', url="http://x")

    assert [r.cells for r in rows] == [("a", "b"), ("c", "")]
