"""Tests for the mill language server feature functions."""

from lsprotocol import types as lsp

from devex.lsp.diagnostics import compute_diagnostics
from devex.lsp.symbols import get_document_symbols
from devex.lsp.completion import get_completions
from devex.lsp.hover import get_hover_info
from devex.lsp.utils import collect_declarations, find_token_at_position

URI = "file:///tmp/example.mill"

SOURCE = """let total = 0;
let add = fn(a, b) {
    let sum = a + b;
    return sum;
};
for item in [1, 2] {
    let step = item;
    total = add(total, step);
}
total"""


def analyze(source: str = SOURCE):
    return compute_diagnostics(URI, source)


class TestDiagnostics:
    def test_clean_document(self):
        result = analyze()
        assert result.diagnostics == []
        assert result.tokens is not None
        assert result.ast is not None

    def test_parse_error(self):
        result = analyze("let x = 1;\nlet = 5;")
        assert len(result.diagnostics) == 1
        diag = result.diagnostics[0]
        assert diag.message == "Expected identifier, found symbol '='"
        assert diag.range.start == lsp.Position(line=1, character=4)
        assert diag.severity == lsp.DiagnosticSeverity.Error
        assert diag.source == "mill"
        assert result.ast is None

    def test_lexer_error(self):
        result = analyze("let x = @;")
        assert len(result.diagnostics) == 1
        assert result.diagnostics[0].range.start.character == 8
        assert result.tokens is None

    def test_runtime_errors_not_reported(self):
        result = analyze("let x = 1; let x = 2;")
        assert result.diagnostics == []


class TestSymbols:
    def test_top_level_symbols(self):
        symbols = get_document_symbols(analyze())
        names = [s.name for s in symbols]
        assert names == ["total", "add", "step"]

    def test_function_symbol(self):
        add = get_document_symbols(analyze())[1]
        assert add.kind == lsp.SymbolKind.Function
        assert add.detail == "fn(a, b)"
        assert [c.name for c in add.children] == ["sum"]
        assert add.range.start == lsp.Position(line=1, character=0)
        assert add.range.end.line == 4

    def test_selection_range_covers_name(self):
        total = get_document_symbols(analyze())[0]
        assert total.kind == lsp.SymbolKind.Variable
        assert total.selection_range.start == lsp.Position(line=0, character=4)
        assert total.selection_range.end == lsp.Position(line=0, character=9)

    def test_no_symbols_without_ast(self):
        assert get_document_symbols(analyze("let = 1;")) == []


class TestCompletion:
    def test_prefix_filters_identifiers(self):
        source = "let apple = 1;\nlet apricot = fn() { return 2; };\nap"
        result = analyze(source)
        items = get_completions(result, lsp.Position(line=2, character=2))
        labels = sorted(item.label for item in items)
        assert labels == ["apple", "apricot"]
        kinds = {item.label: item.kind for item in items}
        assert kinds["apricot"] == lsp.CompletionItemKind.Function

    def test_keywords_offered(self):
        result = analyze("let x = 1;\nwh")
        labels = [item.label for item in get_completions(result, lsp.Position(line=1, character=2))]
        assert labels == ["while"]

    def test_only_declarations_before_cursor(self):
        result = analyze("let a = 1;\n\nlet b = 2;")
        labels = [item.label for item in get_completions(result, lsp.Position(line=1, character=0))]
        assert "a" in labels
        assert "b" not in labels
        assert "let" in labels

    def test_no_completions_after_dot(self):
        result = analyze('let m = {"k": 1};\nm.')
        assert get_completions(result, lsp.Position(line=1, character=2)) == []


class TestHover:
    def test_keyword(self):
        hover = get_hover_info(analyze(), lsp.Position(line=0, character=1))
        assert hover is not None
        assert "Declares a variable" in hover.contents.value

    def test_function_identifier(self):
        hover = get_hover_info(analyze(), lsp.Position(line=7, character=13))
        assert "let add = fn(a, b)" in hover.contents.value
        assert "Declared at line 2" in hover.contents.value

    def test_loop_variable(self):
        hover = get_hover_info(analyze(), lsp.Position(line=6, character=16))
        assert "loop variable" in hover.contents.value

    def test_unknown_position(self):
        assert get_hover_info(analyze(), lsp.Position(line=0, character=13)) is None


class TestUtils:
    def test_collect_declarations(self):
        decls = collect_declarations(analyze().ast)
        assert [(d.name, d.kind) for d in decls] == [
            ("total", "variable"),
            ("add", "function"),
            ("a", "parameter"),
            ("b", "parameter"),
            ("sum", "variable"),
            ("item", "loop variable"),
            ("step", "variable"),
        ]

    def test_find_token_at_position(self):
        tokens = analyze().tokens
        tok = find_token_at_position(tokens, lsp.Position(line=1, character=6))
        assert tok.value == "add"
        assert find_token_at_position(tokens, lsp.Position(line=0, character=3)) is None

    def test_number_token_spans_source_spelling(self):
        tokens = analyze("let x = 007 + 1.50;").tokens
        assert find_token_at_position(tokens, lsp.Position(line=0, character=10)).value == 7
        assert find_token_at_position(tokens, lsp.Position(line=0, character=17)).value == 1.5
        assert find_token_at_position(tokens, lsp.Position(line=0, character=18)).value == ";"
