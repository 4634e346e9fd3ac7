from __future__ import annotations

import unittest
from urllib.parse import parse_qsl

from storefront.facets.query_params import QueryState, decode_query, encode_query


class DecodeQueryTestCase(unittest.TestCase):
    def test_duplicate_fvids_are_deduplicated(self) -> None:
        state = decode_query("fvid=1&fvid=1&fvid=2")
        self.assertEqual(state.selected, {"1", "2"})
        self.assertEqual(state.facet_value_ids, ("1", "2"))

    def test_terms_and_blank_values(self) -> None:
        state = decode_query("?q=red+shoes&fvid=&q=&fvid=7")
        self.assertEqual(state.terms, ("red shoes",))
        self.assertEqual(state.facet_value_ids, ("7",))

    def test_mapping_and_pairs_inputs(self) -> None:
        from_mapping = decode_query({"q": "hat", "fvid": ["3", "4", "3"]})
        from_pairs = decode_query([("fvid", "3"), ("q", "hat"), ("fvid", "4")])
        self.assertEqual(from_mapping, from_pairs)
        self.assertEqual(from_mapping.facet_value_ids, ("3", "4"))

    def test_missing_query_is_empty(self) -> None:
        self.assertEqual(decode_query(None), QueryState())
        self.assertEqual(decode_query(""), QueryState())

    def test_custom_parameter_names(self) -> None:
        state = decode_query("term=x&f=1", query_param="term", facet_value_param="f")
        self.assertEqual(state, QueryState(terms=("x",), facet_value_ids=("1",)))


class EncodeQueryTestCase(unittest.TestCase):
    def test_encodes_terms_then_each_id(self) -> None:
        state = QueryState(terms=("red shoes",), facet_value_ids=("r", "b"))
        self.assertEqual(encode_query(state), "q=red+shoes&fvid=r&fvid=b")

    def test_decode_inverts_encode(self) -> None:
        samples = [
            QueryState(),
            QueryState(facet_value_ids=("1",)),
            QueryState(terms=("a&b=c",), facet_value_ids=("x y", "ü", "10")),
            QueryState(terms=("", "  ", "hat"), facet_value_ids=("r",)),
        ]
        for state in samples:
            with self.subTest(state=state):
                self.assertEqual(decode_query(encode_query(state)), state)

    def test_blank_terms_are_dropped(self) -> None:
        self.assertEqual(QueryState(terms=("", " ")).terms, ())
        self.assertEqual(decode_query("q=+&q=hat").terms, ("hat",))

    def test_to_params_for_get_form(self) -> None:
        state = QueryState(terms=("q1",), facet_value_ids=("1", "2"))
        self.assertEqual(state.to_params(), [("q", "q1"), ("fvid", "1"), ("fvid", "2")])
        self.assertEqual(parse_qsl(encode_query(state)), state.to_params())


if __name__ == "__main__":
    unittest.main()
