# tests/integration_tests/test_cli_scenarios.py
# This file is part of Vigil - An LTL Runtime Verification
#
# End-to-end scenarios: property file + CSV trace through runner and CLI

import pytest

import run_monitor
from logic import CheckOutcome, PropertyAndTraceVerifier
from parser import ParseError
from utils.trace_reader import TraceFormatError

PROPERTIES = """
# request/acknowledge protocol
acked: always(req -> eventually(ack).within(1, seconds))
never_both: always(!(error & busy))
started: eventually(start)
"""


@pytest.fixture
def files(tmp_path):
    def make(properties, trace):
        prop_path = tmp_path / "props.ltl"
        trace_path = tmp_path / "trace.csv"
        prop_path.write_text(properties, encoding="utf-8")
        trace_path.write_text(trace, encoding="utf-8")
        return str(prop_path), str(trace_path)

    return make


class TestRunner:
    """PropertyAndTraceVerifier over files."""

    def test_all_properties_reported(self, files):
        prop, trace = files(PROPERTIES, "sid,time,props\ns1,0,req|start\ns2,400,ack\ns3,800,busy\n")
        results = PropertyAndTraceVerifier(prop, trace).run()

        assert results["acked"].outcome is CheckOutcome.INCONCLUSIVE
        assert results["never_both"].outcome is CheckOutcome.INCONCLUSIVE
        assert results["started"].outcome is CheckOutcome.PASSED

    def test_missed_deadline_fails(self, files):
        prop, trace = files(PROPERTIES, "sid,time,props\ns1,0,req\ns2,600,\ns3,1000,\n")
        results = PropertyAndTraceVerifier(prop, trace).run()

        violation = results["acked"].violation
        assert results["acked"].failed
        assert violation.type == "always"
        assert violation.violation.type == "eventually"
        assert violation.violation.deadline_millis == 1000.0

    def test_tick_millis_applies_without_time_column(self, files):
        prop, trace = files("acked: always(req -> eventually(ack).within(1, seconds))",
                            "sid,props\ns1,req\ns2,\ns3,ack\n")
        assert PropertyAndTraceVerifier(prop, trace, tick_millis=400).run()["acked"].inconclusive
        assert PropertyAndTraceVerifier(prop, trace, tick_millis=600).run()["acked"].failed

    def test_stop_on_verdict(self, files):
        prop, trace = files("safe: always(!error)", "sid,props\ns1,error\ns2,\ns3,\n")
        results = PropertyAndTraceVerifier(prop, trace).run(stop_on_verdict=True)
        assert results["safe"].failed
        assert results["safe"].states == 1

    def test_empty_trace_is_a_trace_error(self, files):
        prop, trace = files("safe: always(!error)", "sid,props\n")
        with pytest.raises(TraceFormatError, match="no snapshots"):
            PropertyAndTraceVerifier(prop, trace).run()

    def test_timestamps_going_back_are_a_trace_error(self, files):
        prop, trace = files("safe: always(!error)", "sid,time,props\ns1,10,\ns2,,\ns3,5,\n")
        with pytest.raises(TraceFormatError):
            PropertyAndTraceVerifier(prop, trace).run()

    def test_bad_property_is_a_parse_error(self, files):
        prop, trace = files("safe: always(!error", "sid,props\ns1,\n")
        with pytest.raises(ParseError):
            PropertyAndTraceVerifier(prop, trace)


class TestCommandLine:
    """Exit codes of run_monitor.main."""

    def test_passing_and_inconclusive_exit_zero(self, files):
        prop, trace = files(PROPERTIES, "sid,time,props\ns1,0,start\n")
        assert run_monitor.main(["-p", prop, "-t", trace]) == run_monitor.EXIT_OK

    def test_failed_property_exit_code(self, files):
        prop, trace = files(PROPERTIES, "sid,time,props\ns1,0,error|busy\n")
        assert run_monitor.main(["-p", prop, "-t", trace, "-v"]) == run_monitor.EXIT_PROPERTY_FAILED

    def test_trace_error_exit_code(self, files, tmp_path):
        prop, _ = files(PROPERTIES, "")
        missing = str(tmp_path / "missing.csv")
        assert run_monitor.main(["-p", prop, "-t", missing]) == run_monitor.EXIT_TRACE_ERROR

    def test_parse_error_exit_code(self, files):
        prop, trace = files("broken: always(", "sid,props\ns1,\n")
        assert run_monitor.main(["-p", prop, "-t", trace]) == run_monitor.EXIT_PARSE_ERROR

    def test_property_file_error_exit_code(self, files, tmp_path):
        _, trace = files(PROPERTIES, "sid,props\ns1,\n")
        missing = str(tmp_path / "missing.ltl")
        assert run_monitor.main(["-p", missing, "-t", trace]) == run_monitor.EXIT_PROPERTY_FILE_ERROR

    def test_empty_property_file_exit_code(self, files):
        prop, trace = files("   \n", "sid,props\ns1,\n")
        assert run_monitor.main(["-p", prop, "-t", trace]) == run_monitor.EXIT_PROPERTY_FILE_ERROR

    def test_validate_only(self, files):
        prop, trace = files(PROPERTIES, "sid,props\ns1,error|busy\n")
        assert run_monitor.main(["-p", prop, "-t", trace, "--validate-only"]) == run_monitor.EXIT_OK

    def test_validate_only_reports_bad_trace(self, files):
        prop, trace = files(PROPERTIES, "props\np\n")
        assert run_monitor.main(["-p", prop, "-t", trace, "--validate-only"]) == run_monitor.EXIT_TRACE_ERROR

    def test_negative_tick_is_a_usage_error(self, files):
        prop, trace = files(PROPERTIES, "sid,props\ns1,\n")
        with pytest.raises(SystemExit):
            run_monitor.main(["-p", prop, "-t", trace, "--tick-millis", "-1"])
