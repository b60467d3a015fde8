def test_fixture_gives_each_test_fresh_numbering(pytester):
    pytester.makepyfile(
        """
        def test_one(calltape):
            m = calltape.mock("m")
            m.op()
            m.op()
            assert calltape.counter.issued == 2

        def test_two(calltape):
            calltape.mock("m").op()
            assert [r.sequence for r in calltape.records()] == [0]
        """
    )
    result = pytester.runpytest()
    result.assert_outcomes(passed=2)


def test_checkpoints_are_checked_after_a_passing_test(pytester):
    pytester.makepyfile(
        """
        from calltape import verify_no_further_interaction

        def test_quiet(calltape):
            m = calltape.mock("m")
            verify_no_further_interaction(m)

        def test_noisy(calltape):
            m = calltape.mock("m")
            verify_no_further_interaction(m)
            m.op("late")
        """
    )
    result = pytester.runpytest()
    result.assert_outcomes(passed=2, errors=1)
    result.stdout.fnmatch_lines(["*Expected no further interaction with m*"])


def test_summary_is_printed_on_failure(pytester):
    pytester.makepyfile(
        """
        from calltape import verify

        def test_fails(calltape):
            m = calltape.mock("mailer")
            m.send("b")
            verify(m).send("a")
        """
    )
    result = pytester.runpytest("-s")
    result.assert_outcomes(failed=1)
    result.stdout.fnmatch_lines(
        [
            "*--- calltape ledger ---*",
            "*#0 mailer.send('b')*",
        ]
    )


def test_debug_option(pytester):
    pytester.makepyfile(
        """
        def test_debug(calltape):
            assert calltape.debug
        """
    )
    result = pytester.runpytest("--calltape-debug")
    result.assert_outcomes(passed=1)


def test_plain_mocks_get_a_fresh_default_session_per_test(pytester):
    pytester.makepyfile(
        """
        from calltape import Mock, default_session, verify

        def test_first():
            Mock("m").ping()

        def test_second():
            m = Mock("m")
            m.ping()
            assert verify(m).ping().sequences == [0]
            assert len(default_session().handles) == 1
        """
    )
    result = pytester.runpytest()
    result.assert_outcomes(passed=2)


def test_plain_mocks_join_the_calltape_session(pytester):
    pytester.makepyfile(
        """
        from calltape import Mock, in_order, verify

        def test_mixed(calltape):
            named = calltape.mock("named")
            plain = Mock("plain")
            plain.a()
            named.b()

            in_order(verify(plain).a(), verify(named).b())
            assert [r.sequence for r in calltape.records()] == [0, 1]
        """
    )
    result = pytester.runpytest()
    result.assert_outcomes(passed=1)
