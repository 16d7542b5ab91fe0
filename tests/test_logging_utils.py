import io
import json
from pathlib import Path

from refcheck_core.interfaces import LogSink, RunReport
from refcheck_pipeline.logging_utils import JSONLLogger, ReferenceLogger
from refcheck_pipeline.reporting import log_run_report, write_markdown_report


def test_jsonl_appends_lines(tmp_path):
    jsonl_path = tmp_path / "events.jsonl"
    logger = JSONLLogger(jsonl_path, auto_timestamp=True)
    logger.log({"a": 1})
    logger.log({"a": 2})
    logger.close()

    lines = jsonl_path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    rec1 = json.loads(lines[0])
    rec2 = json.loads(lines[1])
    assert rec1["a"] == 1 and "ts" in rec1
    assert rec2["a"] == 2 and "ts" in rec2


def test_reference_logger_routes_levels():
    out, err = io.StringIO(), io.StringIO()
    log = ReferenceLogger("Checker", stdout=out, stderr=err)
    assert isinstance(log, LogSink)

    log.info("hello")
    log.warn("careful")
    log.error("broken", source="/a.md")

    assert out.getvalue() == "[Checker] info: hello\n"
    assert err.getvalue() == "[Checker] warn: careful\n[Checker] error: broken\n"
    assert log.counts["error"] == 1 and log.counts["warn"] == 1


def test_quiet_logger_still_mirrors_events(tmp_path, capsys):
    events = JSONLLogger(tmp_path / "ev.jsonl")
    log = ReferenceLogger(events=events, quiet=True)
    log.info("not mirrored")
    log.error("anchor not found #x", source="/a.md", anchor="#x")
    log.close()

    captured = capsys.readouterr()
    assert captured.out == "" and captured.err == ""
    records = [json.loads(line) for line in (tmp_path / "ev.jsonl").read_text(encoding="utf-8").splitlines()]
    assert records == [
        {"level": "error", "scope": "Reference checker", "message": "anchor not found #x", "source": "/a.md", "anchor": "#x"}
    ]


def test_run_report_summary_lines():
    report = RunReport(
        broken_references_count=3,
        unfindable_documents=["/docs/gone.md"],
        ambiguous_matches={"/docs/foo.md": ["/docs/a/foo.md", "/docs/b/foo.md"]},
    )
    out = io.StringIO()
    log_run_report(ReferenceLogger(stdout=out), report)
    text = out.getvalue()
    assert "A total of 3 had errors. 2 still have." in text
    assert "- /docs/gone.md" in text
    assert "-- /docs/b/foo.md" in text

    clean = io.StringIO()
    log_run_report(ReferenceLogger(stdout=clean), RunReport())
    assert "All references intact!" in clean.getvalue()


def test_markdown_report(tmp_path: Path):
    report = RunReport(broken_references_count=1, unfindable_documents=["/docs/gone.md"])
    path = write_markdown_report(tmp_path / "reports" / "refs.md", report)
    text = path.read_text(encoding="utf-8")
    assert text.startswith("# References Report")
    assert "- Broken references found: 1" in text
    assert "## Unfindable documents" in text
