import pytest
from prover import (
    Verifier, VerifierConfig, IOUnavailable, verify,
    ACCEPTED, INVALID, UNPROVABLE, PRIOR_THEOREM, AXIOM, MODUS_PONENS
)

@pytest.fixture
def verifier(tmp_path):
    return Verifier(config=VerifierConfig(base_dir=str(tmp_path)))

class TestAxiomCheck:
    def test_instance_of_k(self, verifier):
        result = verifier.submit("p->(q->p)")
        assert result.ok is True
        assert result.status == ACCEPTED
        assert result.justification.rule == AXIOM
        assert result.justification.axiom == "K"
        assert result.justification.bindings == {"p": "p", "q": "q"}

    def test_instance_with_other_identifiers(self, verifier):
        result = verifier.submit("a->(b->a)")
        assert result.justification.axiom == "K"
        assert result.justification.bindings == {"p": "a", "q": "b"}

    def test_instance_of_s(self, verifier):
        result = verifier.submit("(a->(b->c))->((a->b)->(a->c))")
        assert result.justification.axiom == "S"
        assert result.justification.bindings == {"s": "a", "p": "b", "q": "c"}

    def test_instance_of_e(self, verifier):
        result = verifier.submit("((a->f)->f)->a")
        assert result.justification.axiom == "E"
        assert result.justification.bindings == {"p": "a", "f": "f"}

    def test_e_with_any_identifier_in_the_falsum_slot(self, verifier):
        result = verifier.submit("((a->b)->b)->a")
        assert result.ok is True
        assert result.justification.rule == AXIOM
        assert result.justification.axiom == "E"
        assert result.justification.bindings == {"p": "a", "f": "b"}

    def test_compound_binding(self, verifier):
        result = verifier.submit("(a->b)->(c->(a->b))")
        assert result.justification.axiom == "K"
        assert result.justification.bindings == {"p": "(a->b)", "q": "c"}


class TestPriorTheorems:
    def test_end_to_end(self, verifier):
        first = verifier.submit("p->(q->p)")
        assert first.justification.rule == AXIOM

        second = verifier.submit("a->(b->a)")
        assert second.ok is True
        assert second.justification.rule == PRIOR_THEOREM
        assert second.justification.source == "p->(q->p)"
        assert second.justification.axiom == "K"
        assert second.justification.bindings == {"p": "a", "q": "b"}

        third = verifier.submit("z")
        assert third.status == UNPROVABLE
        assert len(verifier.store) == 2

    def test_resubmission_is_accepted_again(self, verifier):
        verifier.submit("p->(q->p)")
        again = verifier.submit("p->(q->p)")
        assert again.ok is True
        assert again.justification.rule == PRIOR_THEOREM
        assert again.justification.bindings == {"p": "p", "q": "q"}
        assert len(verifier.store) == 2

    def test_every_identifier_of_a_theorem_is_free(self, verifier):
        verifier.submit("((a->f)->f)->a")
        result = verifier.submit("((a->g)->g)->a")
        assert result.ok is True
        assert result.justification.rule == PRIOR_THEOREM
        assert result.justification.axiom == "E"
        assert result.justification.bindings == {"a": "a", "f": "g"}

    def test_mp_conclusion_does_not_claim_an_axiom(self, verifier):
        verifier.submit("(a->(b->a))->(c->(a->(b->a)))")
        mp = verifier.submit("c->(a->(b->a))")
        assert mp.justification.rule == MODUS_PONENS

        result = verifier.submit("d->(a->(b->a))")
        assert result.justification.rule == PRIOR_THEOREM
        assert result.justification.axiom is None
        assert "(axiom" not in result.describe()


class TestModusPonens:
    def test_antecedent_in_store(self, verifier):
        verifier.submit("p->(q->p)")
        verifier.submit("(p->(q->p))->(r->(p->(q->p)))")
        result = verifier.submit("r->(p->(q->p))")
        assert result.ok is True
        assert result.justification.rule == MODUS_PONENS
        assert result.justification.axiom is None
        assert result.justification.premises == ("(p->(q->p))->(r->(p->(q->p)))", "p->(q->p)")
        assert "by modus ponens" in result.describe()

    def test_antecedent_is_axiom_instance(self, verifier):
        verifier.submit("(a->(b->a))->(c->(a->(b->a)))")
        result = verifier.submit("c->(a->(b->a))")
        assert result.justification.rule == MODUS_PONENS
        assert result.justification.axiom == "K"
        assert result.justification.bindings == {"p": "a", "q": "b"}
        assert result.justification.premises == ("(a->(b->a))->(c->(a->(b->a)))", "(a->(b->a))")

    def test_requires_both_premises(self, verifier):
        verifier.submit("p->(q->p)")
        result = verifier.submit("q->p")
        assert result.status == UNPROVABLE
        assert len(verifier.store) == 1


class TestRejections:
    @pytest.mark.parametrize("text", ["p->", "(p->q", "p&q", ""])
    def test_malformed_not_stored(self, verifier, text):
        result = verifier.submit(text)
        assert result.status == INVALID
        assert result.error
        assert len(verifier.store) == 0
        assert verifier.submit("p->(q->p)").ok is True

    def test_unprovable_tautology(self, verifier):
        result = verifier.submit("z->z")
        assert result.status == UNPROVABLE
        assert result.semantics["status"] == "valid"
        assert "tautology" in result.describe()

    def test_unprovable_with_countermodel(self, verifier):
        result = verifier.submit("z")
        assert result.semantics["status"] == "invalid"
        assert "Countermodel: z = False" in result.describe()

    def test_semantic_check_disabled(self):
        verifier = Verifier(config=VerifierConfig(semantic_check=False))
        result = verifier.submit("z")
        assert result.semantics is None
        assert result.describe() == "Formula z is not derivable."


class TestAxiomEditing:
    def test_add_axiom(self, verifier):
        verifier.add_axiom("I", "p->p")
        result = verifier.submit("a->a")
        assert result.justification.axiom == "I"
        assert result.justification.bindings == {"p": "a"}

    def test_remove_axiom(self, verifier):
        verifier.remove_axiom("K")
        result = verifier.submit("p->(q->p)")
        assert result.status == UNPROVABLE
        assert [name for _, name in verifier.list_axioms()] == ["S", "E"]

    def test_unsound_axiom_is_accepted_with_warning(self, verifier, caplog):
        verifier.add_axiom("P", "p->q")
        assert "not a tautology" in caplog.text
        assert verifier.submit("a->b").justification.axiom == "P"


class TestImportExport:
    def test_import_lines(self, verifier):
        verdicts = verifier.import_lines([
            "# comment",
            "p->(q->p)",
            "",
            "p->",
            "a->(b->a)",
            "z",
        ])
        assert [v.status for v in verdicts] == [ACCEPTED, INVALID, ACCEPTED, UNPROVABLE]

    def test_export_in_submission_order(self, verifier):
        verifier.import_lines(["p->(q->p)", "p->", "z"])
        lines = verifier.export().splitlines()
        assert len(lines) == 3
        assert lines[0] == "Formula p->(q->p) is derivable from axiom K with substitution: p -> p, q -> q"
        assert lines[1].startswith("Formula p-> is invalid:")
        assert lines[2].startswith("Formula z is not derivable.")

    def test_import_file_relative_to_base_dir(self, verifier, tmp_path):
        (tmp_path / "formulas.txt").write_text("p->(q->p)\na->(b->a)\n", encoding="utf-8")
        verdicts = verifier.import_file("formulas.txt")
        assert all(v.ok for v in verdicts)
        assert len(verifier.store) == 2

    def test_import_missing_file(self, verifier):
        with pytest.raises(IOUnavailable):
            verifier.import_file("missing.txt")
        assert "Could not open file: missing.txt" in verifier.export()
        assert len(verifier.store) == 0

    def test_export_file(self, verifier, tmp_path):
        verifier.submit("p->(q->p)")
        path = verifier.export_file("report.txt")
        assert (tmp_path / "report.txt").read_text(encoding="utf-8") == verifier.export()
        assert path == str(tmp_path / "report.txt")

    def test_export_unreachable(self, verifier):
        with pytest.raises(IOUnavailable):
            verifier.export_file("no/such/dir/report.txt")

    def test_verify_helper(self):
        verdicts = verify(["p->(q->p)", "z"])
        assert [v.ok for v in verdicts] == [True, False]


class TestDeepFormulas:
    @pytest.fixture
    def verifier(self):
        return Verifier(config=VerifierConfig(semantic_check=False))

    def test_long_arrow_chain_is_checked(self, verifier):
        result = verifier.submit("->".join(["a"] * 1200))
        assert result.status == UNPROVABLE

    def test_deeply_nested_parentheses_are_checked(self, verifier):
        result = verifier.submit("(" * 600 + "p" + ")" * 600)
        assert result.status == UNPROVABLE
        assert result.formula == "(" * 600 + "p" + ")" * 600

    def test_deep_axiom_instance(self, verifier):
        body = "->".join(["b"] * 1000)
        result = verifier.submit(f"({body})->(q->({body}))")
        assert result.justification.rule == AXIOM
        assert result.justification.axiom == "K"
        assert result.justification.bindings["q"] == "q"

        again = verifier.submit(f"({body})->(r->({body}))")
        assert again.justification.rule == PRIOR_THEOREM
        assert again.justification.bindings == {"b": "b", "q": "r"}


class TestConfig:
    def test_from_env(self):
        config = VerifierConfig.from_env({
            "HILBERT_SEMANTIC_CHECK": "off",
            "HILBERT_BASE_DIR": "/tmp/formulas",
            "HILBERT_ENCODING": "latin-1",
        })
        assert config.semantic_check is False
        assert config.base_dir == "/tmp/formulas"
        assert config.encoding == "latin-1"

    def test_defaults(self):
        config = VerifierConfig.from_env({})
        assert config.semantic_check is True
        assert config.encoding == "utf-8"

    def test_resolve(self):
        config = VerifierConfig(base_dir="/data")
        assert config.resolve("a.txt") == "/data/a.txt"
        assert config.resolve("/abs/a.txt") == "/abs/a.txt"
