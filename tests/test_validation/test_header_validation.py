"""Tests for CSV header validation.

Covers:
- Header/schema comparison (case and whitespace insensitive, file order, duplicates)
- Row limit (precedence over header mismatch, boundary)
- Extension check policy
- Determinism of validate()
- Typed errors from raise_for_status()
"""

import pytest

from csv_importer.errors import FormatError, SchemaMismatchError, SizeLimitError
from csv_importer.validation import (
    FORMAT_ERROR_MESSAGE,
    CsvHeaderValidator,
    RawFile,
    SchemaFieldSet,
    check_file_extension,
    validate_csv_headers,
)

SCHEMA = SchemaFieldSet(entity_type="Contact", fields=("Name", "Email"))


class TestHeaderMatching:
    """Header comparison against the schema."""

    def test_all_headers_known(self):
        """Scenario A: every header is a schema field."""
        result = validate_csv_headers("Name,Email\nJohn,j@x.com", SCHEMA)

        assert result.valid is True
        assert result.invalid_headers == ()
        assert result.error_messages == ()
        assert result.normalized_headers == ("name", "email")
        assert result.error_code is None

    def test_unknown_header_reported(self):
        """Scenario B: a header missing from the schema."""
        result = validate_csv_headers("Name,Phone\nJohn,555", SCHEMA)

        assert result.valid is False
        assert result.invalid_headers == ("phone",)
        assert result.error_messages == ("Invalid headers: phone",)
        assert result.error_code == "SCHEMA_MISMATCH_ERROR"

    def test_case_and_whitespace_ignored(self):
        """' Email ' in the file matches 'email' in the schema."""
        result = validate_csv_headers(" Email ,NAME\nj@x.com,John", ["email", "  name"])

        assert result.valid is True
        assert result.normalized_headers == ("email", "name")

    def test_invalid_headers_keep_file_order_and_duplicates(self):
        result = validate_csv_headers("Zip,Name,Phone,zip", SCHEMA)

        assert result.invalid_headers == ("zip", "phone", "zip")
        assert result.error_messages == ("Invalid headers: zip, phone, zip",)

    def test_carriage_return_trimmed(self):
        """Windows line endings leave a trailing \\r that normalization strips."""
        result = validate_csv_headers("Name,Email\r\nJohn,j@x.com\r\n", SCHEMA)

        assert result.valid is True

    def test_empty_schema_rejects_every_header(self):
        result = validate_csv_headers("Name,Email", SchemaFieldSet(entity_type="Contact"))

        assert result.valid is False
        assert result.invalid_headers == ("name", "email")

    def test_empty_content_is_one_blank_header(self):
        result = validate_csv_headers("", SCHEMA)

        assert result.valid is False
        assert result.invalid_headers == ("",)
        assert result.row_count == 1


class TestRowLimit:
    """Row counting and the row limit."""

    def test_row_limit_takes_precedence(self):
        """Scenario C: 10,001 lines with bad headers reports only the row limit."""
        content = "\n".join(["Bogus,Headers"] + ["a,b"] * 10_000)

        result = validate_csv_headers(content, SCHEMA)

        assert result.valid is False
        assert result.error_code == "SIZE_LIMIT_ERROR"
        assert result.error_messages == ("The file contains more than 10,000 rows.",)
        assert result.invalid_headers == ()
        assert result.normalized_headers == ()
        assert result.row_count == 10_001

    def test_exactly_at_limit_is_accepted(self):
        content = "\n".join(["Name,Email"] + ["John,j@x.com"] * 9_999)

        result = validate_csv_headers(content, SCHEMA)

        assert result.valid is True
        assert result.row_count == 10_000

    def test_trailing_newline_counts_as_a_row(self):
        validator = CsvHeaderValidator(row_limit=2)

        assert validator.validate("Name,Email\nJohn,j@x.com", SCHEMA).valid is True
        assert validator.validate("Name,Email\nJohn,j@x.com\n", SCHEMA).error_code == "SIZE_LIMIT_ERROR"

    def test_custom_limit_in_message(self):
        result = CsvHeaderValidator(row_limit=1500).validate("\n" * 1500, SCHEMA)

        assert result.error_messages == ("The file contains more than 1,500 rows.",)


class TestDeterminism:
    def test_repeated_calls_are_equal(self):
        validator = CsvHeaderValidator()
        content = "Name,Phone\nJohn,555"

        first = validator.validate(content, SCHEMA)
        second = validator.validate(content, SCHEMA)

        assert first == second
        assert first.to_dict() == second.to_dict()

    def test_result_is_frozen(self):
        result = validate_csv_headers("Name", SCHEMA)

        with pytest.raises(AttributeError):
            result.valid = False


class TestExtensionCheck:
    """Scenario D and the case policy of the extension check."""

    def test_txt_rejected(self):
        with pytest.raises(FormatError) as exc_info:
            check_file_extension("data.txt")

        assert exc_info.value.message == FORMAT_ERROR_MESSAGE
        assert exc_info.value.code == "FORMAT_ERROR"

    def test_uppercase_accepted_by_default(self):
        check_file_extension("DATA.CSV")

    def test_uppercase_rejected_when_case_sensitive(self):
        with pytest.raises(FormatError):
            check_file_extension("DATA.CSV", case_sensitive=True)

    def test_csv_in_middle_of_name_rejected(self):
        with pytest.raises(FormatError):
            check_file_extension("data.csv.bak")


class TestRaiseForStatus:
    def test_valid_result_does_not_raise(self):
        validate_csv_headers("Name", SCHEMA).raise_for_status()

    def test_mismatch_raises_with_headers(self):
        result = validate_csv_headers("Name,Phone", SCHEMA)

        with pytest.raises(SchemaMismatchError) as exc_info:
            result.raise_for_status()

        assert exc_info.value.invalid_headers == ["phone"]

    def test_size_limit_raises(self):
        result = CsvHeaderValidator(row_limit=1).validate("Name\nJohn", SCHEMA)

        with pytest.raises(SizeLimitError):
            result.raise_for_status()


class TestRawFile:
    @pytest.mark.asyncio
    async def test_read_text_strips_bom(self):
        raw = RawFile(filename="data.csv", content="\ufeffName,Email".encode("utf-8"))

        assert await raw.read_text() == "Name,Email"

    @pytest.mark.asyncio
    async def test_read_text_falls_back_to_latin1(self):
        raw = RawFile(filename="data.csv", content="Name,Café".encode("latin-1"))

        assert await raw.read_text() == "Name,Café"

    @pytest.mark.asyncio
    async def test_from_path(self, tmp_path):
        path = tmp_path / "contacts.csv"
        path.write_text("Name,Email\n")

        raw = await RawFile.from_path(path)

        assert raw.filename == "contacts.csv"
        assert raw.content == b"Name,Email\n"
