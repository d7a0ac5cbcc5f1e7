"""Tests for mapping native backend records onto the shared record shape."""
from __future__ import annotations

from legal_research.models import (
    AustLIIResult,
    BillAction,
    CaseLawSearchResult,
    Category,
    CongressBill,
    Jurisdiction,
    LegislationSearchResult,
    RegulationComment,
    Sponsor,
    USCodeSection,
)
from legal_research.normalize import (
    austlii_to_record,
    bill_to_record,
    case_to_record,
    comment_to_record,
    infer_category,
    legislation_to_record,
    parse_jurisdiction,
    parse_year,
    truncate,
    us_code_to_record,
)


class TestInferCategory:
    def test_act_means_legislation(self):
        assert infer_category("Commonwealth Consolidated Acts") is Category.LEGISLATION

    def test_case_means_case_law(self):
        assert infer_category("High Court of Australia Cases") is Category.CASE_LAW

    def test_anything_else_is_secondary(self):
        assert infer_category("Law Reform Commission Reports") is Category.SECONDARY
        assert infer_category(None) is Category.SECONDARY


class TestParsers:
    def test_parse_jurisdiction_codes_and_names(self):
        assert parse_jurisdiction("nsw") is Jurisdiction.NSW
        assert parse_jurisdiction("New South Wales") is Jurisdiction.NSW
        assert parse_jurisdiction("Commonwealth") is Jurisdiction.CTH
        assert parse_jurisdiction("Mars") is None
        assert parse_jurisdiction(None) is None

    def test_parse_year(self):
        assert parse_year("Act No. 110 of 1993") == 1993
        assert parse_year("No year here") is None

    def test_truncate(self):
        assert truncate("short") == "short"
        long = "word " * 100
        out = truncate(long, 50)
        assert len(out) <= 50
        assert out.endswith("...")
        assert truncate("") is None


class TestRecordMappers:
    def test_bill(self):
        bill = CongressBill(
            congress=118,
            type="HR",
            number="2640",
            title="Border Security and Enforcement Act",
            url="https://api.congress.gov/v3/bill/118/hr/2640",
            latest_action=BillAction(action_date="2023-05-11", text="Passed House"),
            sponsors=[Sponsor(first_name="Jane", last_name="Doe", party="R", state="TX")],
        )
        record = bill_to_record(bill, "congress")
        assert record.category is Category.BILL
        assert record.jurisdiction is Jurisdiction.US
        assert record.date == "2023-05-11"
        assert record.snippet == "Passed House"
        assert record.extras["designation"] == "118-HR-2640"
        assert record.extras["sponsor"] == "Jane Doe (R-TX)"
        assert "subjects" not in record.extras

    def test_us_code_title(self):
        section = USCodeSection(title=8, section="1101", heading="Definitions", url="u")
        record = us_code_to_record(section, "us_code")
        assert record.title == "Title 8, Section 1101: Definitions"
        assert record.extras["citation"] == "8 U.S.C. § 1101"

    def test_comment_without_title(self):
        record = comment_to_record(RegulationComment(id="EPA-2024-0001-0002"), "regulations_gov")
        assert record.title == "Comment EPA-2024-0001-0002"
        assert record.url == "https://www.regulations.gov/comment/EPA-2024-0001-0002"
        assert record.category is Category.COMMENT

    def test_austlii_infers_category_and_jurisdiction(self):
        result = AustLIIResult(
            title="Mabo v Queensland (No 2)",
            url="u",
            database="High Court of Australia Cases",
            jurisdiction="Commonwealth",
        )
        record = austlii_to_record(result, "austlii")
        assert record.category is Category.CASE_LAW
        assert record.jurisdiction is Jurisdiction.CTH

    def test_legislation(self):
        result = LegislationSearchResult(
            title="Native Title Act 1993", url="u", jurisdiction="CTH", act_number="110", year=1993
        )
        record = legislation_to_record(result, "federal_legislation")
        assert record.date == "1993"
        assert record.extras == {"act_number": "110", "year": 1993}

    def test_case(self):
        result = CaseLawSearchResult(
            case_name="Love v Commonwealth",
            url="u",
            citation="[2020] HCA 3",
            court="High Court of Australia",
            jurisdiction="CTH",
            catchwords=["Constitutional law", "aliens power"],
        )
        record = case_to_record(result, "high_court")
        assert record.category is Category.CASE_LAW
        assert record.extras["citation"] == "[2020] HCA 3"
        assert record.extras["catchwords"] == ["Constitutional law", "aliens power"]
