import requests

from channel_insights.services import emails
from channel_insights.services.emails import EmailFinder, extract_emails, select_best
from channel_insights.snapshots import ChannelSeed, EmailCandidate

from conftest import FIXED_NOW, fixed_clock


class DummyResponse:
    def __init__(self, status_code: int, text: str = ""):
        self.status_code = status_code
        self.text = text

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(response=self)


def test_extract_skips_noreply_and_flags_business():
    candidates = extract_emails("Contact: business@studio.com or noreply@spam.com")
    assert candidates == [EmailCandidate(address="business@studio.com", is_business_like=True)]


def test_extract_keeps_text_order_and_dedupes():
    text = "me@gmail.com, Hello@Studio.com, hello@studio.com and friend@yahoo.com"
    addresses = [candidate.address for candidate in extract_emails(text)]
    assert addresses == ["me@gmail.com", "Hello@Studio.com", "friend@yahoo.com"]


def test_extract_rejects_placeholder_domains():
    text = (
        "test@example.com user@test.com admin@localhost.dev "
        "DoNotReply@shop.com no-reply@shop.com real@creator.tv"
    )
    assert [candidate.address for candidate in extract_emails(text)] == ["real@creator.tv"]


def test_extract_rejects_overlong_addresses():
    address = "a" * 95 + "@brand.com"
    assert extract_emails(f"reach me at {address}") == []


def test_extract_empty_text():
    assert extract_emails("") == []
    assert extract_emails(None) == []


def test_select_best_prefers_business_address():
    best = select_best(extract_emails("me@gmail.com or partnerships@brand.co"))
    assert best.address == "partnerships@brand.co"
    assert best.is_business_like
    assert best.confidence == emails.BIO_CONFIDENCE


def test_select_best_falls_back_to_first_address():
    best = select_best(extract_emails("a.person@gmail.com, other@yahoo.com"))
    assert best.address == "a.person@gmail.com"
    assert not best.is_business_like
    assert best.confidence == 0.9


def test_select_best_without_candidates():
    assert select_best([]) is None


def test_finder_combines_description_and_about_page():
    finder = EmailFinder(
        fetch_about=lambda seed: "Business inquiries: collab@janestudio.com",
        clock=fixed_clock,
    )
    seed = ChannelSeed(name="Jane", description="Personal: jane@gmail.com")

    lookup = finder.find(seed)

    assert lookup.email == "collab@janestudio.com"
    assert lookup.business_email == "collab@janestudio.com"
    assert lookup.confidence == 0.9
    assert lookup.source == "youtube_bio"
    assert lookup.alternative_emails == ["jane@gmail.com"]
    assert lookup.last_checked == FIXED_NOW


def test_finder_personal_address_has_no_business_email():
    finder = EmailFinder(fetch_about=lambda seed: "", clock=fixed_clock)
    lookup = finder.find(ChannelSeed(name="Jane", description="jane@gmail.com"))
    assert lookup.email == "jane@gmail.com"
    assert lookup.business_email is None


def test_finder_without_candidates():
    finder = EmailFinder(fetch_about=lambda seed: "nothing here", clock=fixed_clock)
    lookup = finder.find(ChannelSeed(name="Quiet"))
    assert lookup.email is None
    assert lookup.confidence == 0
    assert lookup.source == "none"
    assert lookup.alternative_emails == []


def test_fetch_about_text_unescapes_page(monkeypatch):
    calls = []

    def fake_get(url, timeout):
        calls.append(url)
        return DummyResponse(200, "mail: hi&#64;creator.tv")

    monkeypatch.setattr(emails.SESSION, "get", fake_get)
    text = emails.fetch_about_text(ChannelSeed(channel_id="UC1234567890123456789012"))

    assert calls == ["https://www.youtube.com/channel/UC1234567890123456789012/about"]
    assert text == "mail: hi@creator.tv"


def test_fetch_about_text_swallows_http_errors(monkeypatch):
    monkeypatch.setattr(emails.SESSION, "get", lambda url, timeout: DummyResponse(500))
    assert emails.fetch_about_text(ChannelSeed(handle="creator")) == ""


def test_fetch_about_text_without_reference():
    assert emails.fetch_about_text(ChannelSeed(name="Nameless")) == ""
