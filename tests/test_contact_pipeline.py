from moovs_data_prep.pipeline import ContactPipeline
from moovs_data_prep.schemas import CONTACT_HEADERS, Contact, IssueType

from conftest import contact_row


def test_phone_is_formatted_and_missing_email_gets_suggestion(allocator, validator):
    result = ContactPipeline(allocator).run([
        contact_row(firstName="John", lastName="Smith", email="", mobilePhone="2065551234"),
    ])
    assert result.records[0].mobile_phone == "+1 206-555-1234"

    outcome = validator.validate_contacts(result.records)
    email_issues = [i for i in outcome.issues if i.field == "email"]
    assert len(email_issues) == 1
    assert email_issues[0].type == IssueType.MISSING
    assert email_issues[0].suggested_value.endswith("@import.moovs.com")


def test_business_entries_are_dropped(allocator):
    result = ContactPipeline(allocator).run([
        contact_row(firstName="Accounts Payable", lastName="Dept", email="ap@acme.com"),
        contact_row(firstName="Jane", lastName="Doe", email="jane@example.com", mobilePhone="4255557788"),
    ])
    assert result.dropped_count == 1
    assert result.dropped[0].reason == "Business or event entry"
    assert [r.first_name for r in result.records] == ["Jane"]
    assert result.source_rows == [1]


def test_rows_without_names_are_dropped_before_cleaning(allocator):
    result = ContactPipeline(allocator).run([
        contact_row(email="orphan@example.com", mobilePhone="2065551234"),
    ])
    assert result.output_count == 0
    assert result.dropped[0].reason == "No first or last name"
    assert allocator.issued_count == 0


def test_exact_repeats_are_merged_with_backfill(allocator):
    result = ContactPipeline(allocator).run([
        contact_row(firstName="Jane", lastName="Doe", email="jane@example.com", mobilePhone="4255557788"),
        contact_row(firstName="jane", lastName="DOE", email="Jane@Example.com", mobilePhone="(425) 555-7788",
                    homeAddress="1 Main St"),
    ])
    assert result.output_count == 1
    assert result.merged_count == 1
    assert result.merged[0].kept_source_index == 0
    assert result.records[0].home_address == "1 Main St"


def test_placeholder_phones_do_not_merge_different_emails(allocator):
    result = ContactPipeline(allocator).run([
        contact_row(firstName="Jane", lastName="Doe", email="jane@example.com"),
        contact_row(firstName="Jane", lastName="Doe", email="jane.doe@work.com"),
    ])
    assert result.output_count == 2
    assert [r.mobile_phone for r in result.records] == ["+1 202-555-0100", "+1 202-555-0101"]


def test_output_records_carry_only_canonical_columns(allocator):
    result = ContactPipeline(allocator).run([
        contact_row(firstName="Jane", lastName="Doe", _homePhone="4255557788", _street="1 Main St",
                    _city="Seattle", _state="WA"),
    ])
    record = result.records[0]
    assert isinstance(record, Contact)
    assert list(record.to_row()) == CONTACT_HEADERS
    assert record.home_address == "1 Main St, Seattle, WA"
    assert result.warnings[0]


def test_potential_issue_summary(allocator):
    result = ContactPipeline(allocator).run([
        contact_row(firstName="Jane", lastName="", email="a@example.com;b@example.com"),
        contact_row(firstName="Accounts Payable", lastName="Dept"),
        contact_row(firstName="ACME", lastName="Corp"),
    ])
    summary = result.stats["potential_issues"]
    assert summary["business_entries"] == 1
    assert summary["multiple_emails"] == 1
    assert summary["missing_names"] == 1
    assert summary["unusual_names"] == 1
    assert summary["missing_phones"] == 3
