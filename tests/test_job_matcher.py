from lastgreen.ci.job_matcher import evaluate, match_jobs, qualify_run
from lastgreen.ci.models import Job, MatchResult, WorkflowRun


def _run(status="completed", conclusion="success"):
    return WorkflowRun(id=1, head_sha="abc123", status=status, conclusion=conclusion)


def _jobs(*pairs):
    return [Job(id=i + 100, name=name, conclusion=conclusion) for i, (name, conclusion) in enumerate(pairs)]


def test_passing_setup_and_tests_qualify(make_criteria):
    criteria = make_criteria(required_job_keys="test")
    jobs = _jobs(("test-setup", "success"), ("test (dir1)", "success"), ("test (dir2)", "skipped"))

    verdict = evaluate(_run(), jobs, criteria)

    assert verdict.qualifies
    assert verdict.match.main_job_status == "success"
    assert verdict.match.test_status == "success"
    assert verdict.match.matched_test_job_names == ("test (dir1)", "test (dir2)")


def test_main_job_match_is_case_insensitive(make_criteria):
    criteria = make_criteria(main_job_key="Test-Setup", required_job_keys="NODE-tests")
    jobs = _jobs(("TEST-SETUP", "success"), ("node-TESTS", "success"))

    assert evaluate(_run(), jobs, criteria).qualifies


def test_first_matching_main_job_wins(make_criteria):
    criteria = make_criteria()
    jobs = _jobs(("test-setup", "failure"), ("test-setup", "success"), ("node-tests", "success"))

    result = match_jobs(jobs, criteria)

    assert result.main_job_status == "failure"


def test_missing_main_job(make_criteria):
    result = match_jobs(_jobs(("node-tests", "success")), make_criteria())
    assert result.main_job_status == "missing"
    assert not qualify_run(_run(), result).qualifies


def test_prefix_match_admits_matrix_jobs_and_rejects_others(make_criteria):
    criteria = make_criteria(required_job_keys="test")
    jobs = _jobs(
        ("test-setup", "success"),
        ("test (dir1)", "success"),
        ("test (dir2)", "success"),
        ("unit-test", "failure"),
        ("lint", "failure"),
    )

    result = match_jobs(jobs, criteria)

    assert result.matched_test_job_names == ("test (dir1)", "test (dir2)")
    assert result.test_status == "success"


def test_prefix_match_sharp_edge_admits_unrelated_prefix(make_criteria):
    criteria = make_criteria(required_job_keys="test")
    jobs = _jobs(("test-setup", "success"), ("testimonial-checker", "failure"))

    result = match_jobs(jobs, criteria)

    assert result.matched_test_job_names == ("testimonial-checker",)
    assert result.test_status == "failure"


def test_main_job_is_excluded_from_required_jobs(make_criteria):
    criteria = make_criteria(main_job_key="test-setup", required_job_keys="test")
    jobs = _jobs(("test-setup", "success"), ("test (a)", "failure"))

    result = match_jobs(jobs, criteria)

    assert result.matched_test_job_names == ("test (a)",)
    assert not qualify_run(_run(), result).qualifies


def test_only_main_job_matching_prefix_leaves_tests_missing(make_criteria):
    criteria = make_criteria(main_job_key="test-setup", required_job_keys="test")
    result = match_jobs(_jobs(("test-setup", "success")), criteria)

    assert result.test_status == "missing"
    assert result.matched_test_jobs == ()


def test_zero_required_jobs_never_qualifies(make_criteria):
    verdict = evaluate(_run(), _jobs(("test-setup", "success"), ("lint", "success")), make_criteria())

    assert verdict.match.test_status == "missing"
    assert not verdict.qualifies
    assert "missing" in verdict.reason


def test_any_failing_required_job_fails(make_criteria):
    criteria = make_criteria(required_job_keys="node-tests, dotnet-tests")
    jobs = _jobs(("test-setup", "success"), ("node-tests", "success"), ("dotnet-tests", "cancelled"))

    result = match_jobs(jobs, criteria)

    assert result.test_status == "failure"


def test_required_job_without_conclusion_fails(make_criteria):
    jobs = _jobs(("test-setup", "success"), ("node-tests", None))
    assert match_jobs(jobs, make_criteria()).test_status == "failure"


def test_cancelled_run_never_qualifies(make_criteria):
    jobs = _jobs(("test-setup", "success"), ("node-tests", "success"))

    for conclusion in ("cancelled", "timed_out", "stale"):
        verdict = evaluate(_run(conclusion=conclusion), jobs, make_criteria())
        assert not verdict.qualifies
        assert conclusion in verdict.reason


def test_incomplete_run_never_qualifies(make_criteria):
    jobs = _jobs(("test-setup", "success"), ("node-tests", "success"))
    verdict = evaluate(_run(status="in_progress", conclusion=None), jobs, make_criteria())

    assert not verdict.qualifies
    assert "in_progress" in verdict.reason


def test_failed_run_conclusion_with_passing_jobs_still_qualifies(make_criteria):
    # only cancelled / timed_out / stale disqualify at run level
    jobs = _jobs(("test-setup", "success"), ("node-tests", "success"))
    assert evaluate(_run(conclusion="failure"), jobs, make_criteria()).qualifies


def test_skipped_test_status_is_accepted_by_qualifier():
    match = MatchResult(main_job_status="success", test_status="skipped")
    assert qualify_run(_run(), match).qualifies


def test_id_or_name_matching_uses_job_id(make_criteria):
    criteria = make_criteria(main_job_key="555", required_job_keys="77", match_by="id-or-name")
    jobs = [
        Job(id=555, name="setup", conclusion="success"),
        Job(id=771, name="matrix a", conclusion="success"),
        Job(id=772, name="matrix b", conclusion="skipped"),
        Job(id=900, name="lint", conclusion="failure"),
    ]

    verdict = evaluate(_run(), jobs, criteria)

    assert verdict.qualifies
    assert verdict.match.matched_test_job_names == ("matrix a", "matrix b")


def test_name_mode_ignores_job_id(make_criteria):
    criteria = make_criteria(main_job_key="555", required_job_keys="77")
    jobs = [Job(id=555, name="setup", conclusion="success"), Job(id=771, name="a", conclusion="success")]

    result = match_jobs(jobs, criteria)

    assert result.main_job_status == "missing"
    assert result.test_status == "missing"
