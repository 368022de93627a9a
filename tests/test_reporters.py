import io
import re

from zeget.github import Asset
from zeget.reporters import AssetSha256HashReporter, MessageReporter


def test_sha256_reporter_writes_hash_and_name():
    buffer = io.StringIO()
    reporter = AssetSha256HashReporter(Asset(name="TestAsset"), buffer)
    reporter.report("hello world")
    assert "TestAsset" in buffer.getvalue()
    assert re.fullmatch(r"› [a-f0-9]{64} TestAsset\n", buffer.getvalue())


def test_sha256_reporter_same_input_same_hash():
    first, second = io.StringIO(), io.StringIO()
    AssetSha256HashReporter(Asset(name="a"), first).report("x")
    AssetSha256HashReporter(Asset(name="a"), second).report("x")
    other = io.StringIO()
    AssetSha256HashReporter(Asset(name="a"), other).report("y")
    assert first.getvalue() == second.getvalue()
    assert first.getvalue() != other.getvalue()


def test_message_reporter_no_format_no_input_writes_nothing():
    buffer = io.StringIO()
    MessageReporter(buffer, "", None).report()
    assert buffer.getvalue() == ""


def test_message_reporter_format_without_arguments():
    buffer = io.StringIO()
    MessageReporter(buffer, "Test message").report()
    assert "Test message" in buffer.getvalue()
    assert buffer.getvalue() == "› Test message"


def test_message_reporter_format_with_arguments():
    buffer = io.StringIO()
    MessageReporter(buffer, "Test %s", "message").report()
    assert "Test message" in buffer.getvalue()


def test_message_reporter_input_without_format():
    buffer = io.StringIO()
    MessageReporter(buffer, "").report("message")
    assert "message" in buffer.getvalue()
    assert buffer.getvalue() == "› message\n"