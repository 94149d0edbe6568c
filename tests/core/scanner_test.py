import unittest

from lox.core.scanner import scan
from lox.core.tokens import Token, TokenType
from lox.lang.error import Diagnostics


def types(source, diagnostics=None):
    return [token.type for token in scan(source, diagnostics or Diagnostics())]


class ScannerTestCase(unittest.TestCase):

    def test_punctuation(self):
        cases = {
            "(){},.-+;*/": [
                TokenType.LEFT_PAREN, TokenType.RIGHT_PAREN, TokenType.LEFT_BRACE, TokenType.RIGHT_BRACE,
                TokenType.COMMA, TokenType.DOT, TokenType.MINUS, TokenType.PLUS, TokenType.SEMICOLON,
                TokenType.STAR, TokenType.SLASH, TokenType.EOF,
            ],
            "! != = == < <= > >=": [
                TokenType.BANG, TokenType.BANG_EQUAL, TokenType.EQUAL, TokenType.EQUAL_EQUAL, TokenType.LESS,
                TokenType.LESS_EQUAL, TokenType.GREATER, TokenType.GREATER_EQUAL, TokenType.EOF,
            ],
            "===": [TokenType.EQUAL_EQUAL, TokenType.EQUAL, TokenType.EOF],
            "!==": [TokenType.BANG_EQUAL, TokenType.EQUAL, TokenType.EOF],
            "": [TokenType.EOF],
        }
        for case, expected in cases.items():
            self.assertEqual(expected, types(case), case)

    def test_comments_and_whitespace(self):
        cases = {
            "// nothing here": [TokenType.EOF],
            "1 // one\n2": [TokenType.NUMBER, TokenType.NUMBER, TokenType.EOF],
            " \t\r\n": [TokenType.EOF],
            "1 / 2": [TokenType.NUMBER, TokenType.SLASH, TokenType.NUMBER, TokenType.EOF],
        }
        for case, expected in cases.items():
            self.assertEqual(expected, types(case), case)

    def test_lines(self):
        tokens = scan("a\nb\n\nc // d\n\"e\nf\" g", Diagnostics())
        self.assertEqual([1, 2, 4, 6, 6, 6], [token.line for token in tokens])

    def test_columns(self):
        tokens = scan('a\n  bc = "x";\n\t!=', Diagnostics())
        self.assertEqual([0, 2, 5, 7, 10, 1, 3], [token.column for token in tokens])

    def test_column_of_multiline_string(self):
        tokens = scan('x "a\nb" y', Diagnostics())
        self.assertEqual([0, None, 3], [token.column for token in tokens[:3]])
        self.assertEqual(2, tokens[2].line)

    def test_column_not_compared(self):
        self.assertEqual(Token(TokenType.IDENTIFIER, "a", None, 1, 4), Token(TokenType.IDENTIFIER, "a", None, 1))

    def test_numbers(self):
        cases = {"123": 123.0, "1.5": 1.5, "0": 0.0, "007.25": 7.25}
        for case, expected in cases.items():
            token = scan(case, Diagnostics())[0]
            self.assertEqual(Token(TokenType.NUMBER, case, expected, 1), token, case)
            self.assertIsInstance(token.literal, float, case)

    def test_trailing_dot(self):
        tokens = scan("12.", Diagnostics())
        self.assertEqual([TokenType.NUMBER, TokenType.DOT, TokenType.EOF], [token.type for token in tokens])
        self.assertEqual("12", tokens[0].lexeme)

        tokens = scan(".5", Diagnostics())
        self.assertEqual([TokenType.DOT, TokenType.NUMBER, TokenType.EOF], [token.type for token in tokens])

    def test_strings(self):
        token = scan('"hello world"', Diagnostics())[0]
        self.assertEqual(Token(TokenType.STRING, '"hello world"', "hello world", 1), token)

        token = scan('""', Diagnostics())[0]
        self.assertEqual("", token.literal)

        token = scan('"a\\n"', Diagnostics())[0]
        self.assertEqual("a\\n", token.literal)  # no escape processing

    def test_unterminated_string(self):
        diagnostics = Diagnostics()
        tokens = scan('print 1;\n"abc', diagnostics)

        self.assertEqual([TokenType.PRINT, TokenType.NUMBER, TokenType.SEMICOLON, TokenType.EOF],
                         [token.type for token in tokens])
        self.assertTrue(diagnostics.had_error)
        self.assertEqual(["[line 2] Error: Unterminated string."], [str(record) for record in diagnostics])

    def test_unterminated_string_line(self):
        diagnostics = Diagnostics()
        scan('"abc\ndef\n', diagnostics)
        self.assertEqual(3, diagnostics.records[0].line)

    def test_identifiers_and_keywords(self):
        cases = {
            "foo": TokenType.IDENTIFIER,
            "_bar1": TokenType.IDENTIFIER,
            "Print": TokenType.IDENTIFIER,
            "variable": TokenType.IDENTIFIER,
            "var": TokenType.VAR,
            "print": TokenType.PRINT,
            "nil": TokenType.NIL,
            "true": TokenType.TRUE,
            "false": TokenType.FALSE,
            "and": TokenType.AND,
            "while": TokenType.WHILE,
        }
        for case, expected in cases.items():
            tokens = scan(case, Diagnostics())
            self.assertEqual(expected, tokens[0].type, case)
            self.assertEqual(case, tokens[0].lexeme, case)
            self.assertIsNone(tokens[0].literal, case)

    def test_unexpected_character(self):
        diagnostics = Diagnostics()
        tokens = scan("1 @ 2 #", diagnostics)

        self.assertEqual([TokenType.NUMBER, TokenType.NUMBER, TokenType.EOF], [token.type for token in tokens])
        self.assertEqual(2, len(diagnostics))
        self.assertEqual("[line 1] Error: Unexpected character.", str(diagnostics.records[0]))
        self.assertEqual("@", diagnostics.records[0].lexeme)

    def test_single_eof(self):
        should_pass = ["", "var x = 1;", '"open', "@@@", "// only a comment"]
        for case in should_pass:
            eofs = [token for token in scan(case, Diagnostics()) if token.type is TokenType.EOF]
            self.assertEqual(1, len(eofs), case)
            self.assertIs(TokenType.EOF, scan(case, Diagnostics())[-1].type, case)

    def test_rescan_lexemes(self):
        should_pass = [
            "var x = 1 + 2.5 * (3 - 4) / 5;",
            'print "a" == "a" != !true;',
            "{ var y; y = x >= 1 <= 2 > 3 < 4; }",
        ]
        for case in should_pass:
            tokens = scan(case, Diagnostics())
            rescanned = scan(" ".join(token.lexeme for token in tokens), Diagnostics())
            self.assertEqual([token.type for token in tokens], [token.type for token in rescanned], case)


if __name__ == '__main__':
    unittest.main()
