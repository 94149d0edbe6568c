import io
import unittest

from lox.core.tokens import Token, TokenType
from lox.lang.error import Diagnostic, Diagnostics, ErrorHandler, LoxRuntimeError, ParseError, ScanError


class ErrorTestCase(unittest.TestCase):

    def test_render(self):
        cases = {
            "[line 3] Error: Unexpected character.": ScanError(3, "Unexpected character.", "@"),
            "[line 1] Error at 'x': Expect expression.":
                ParseError(Token(TokenType.IDENTIFIER, "x", None, 1), "Expect expression."),
            "[line 9] Error at end: Expect ';' after value.":
                ParseError(Token(TokenType.EOF, "", None, 9), "Expect ';' after value."),
            "[line 2] Error at '+': Operands must be numbers.":
                LoxRuntimeError(Token(TokenType.PLUS, "+", None, 2), "Operands must be numbers."),
        }
        for expected, case in cases.items():
            self.assertEqual(expected, str(case))
            self.assertEqual(expected, str(Diagnostic.from_error(case)))

    def test_from_error_carries_column(self):
        cases = {
            ScanError(1, "Unexpected character.", "@", 6): ("@", 6),
            ScanError(1, "Unterminated string."): (None, None),
            ParseError(Token(TokenType.SEMICOLON, ";", None, 1, 9), "Expect expression."): (";", 9),
            LoxRuntimeError(Token(TokenType.PLUS, "+", None, 1), "Operands must be numbers."): ("+", None),
        }
        for case, expected in cases.items():
            diagnostic = Diagnostic.from_error(case)
            self.assertEqual(expected, (diagnostic.lexeme, diagnostic.column), str(case))

    def test_diagnostic_defaults(self):
        diagnostic = Diagnostic("lexical", 1, "", "Unterminated string.")
        self.assertIsNone(diagnostic.lexeme)
        self.assertIsNone(diagnostic.column)


class DiagnosticsTestCase(unittest.TestCase):

    def test_flags(self):
        diagnostics = Diagnostics()
        self.assertFalse(diagnostics.had_error)
        self.assertFalse(diagnostics.had_runtime_error)

        diagnostics.report(LoxRuntimeError(Token(TokenType.MINUS, "-", None, 1), "Operand must be a number."))
        self.assertFalse(diagnostics.had_error)
        self.assertTrue(diagnostics.had_runtime_error)

        diagnostics.report(ScanError(1, "Unterminated string."))
        self.assertTrue(diagnostics.had_error)

        diagnostics.reset()
        self.assertEqual(0, len(diagnostics))
        self.assertFalse(diagnostics.had_error)
        self.assertFalse(diagnostics.had_runtime_error)

    def test_sink(self):
        received = []
        diagnostics = Diagnostics(sink=received.append)
        recorded = diagnostics.report(ScanError(4, "Unexpected character.", "$"))

        self.assertEqual([recorded], received)
        self.assertEqual(Diagnostic("lexical", 4, "", "Unexpected character.", "$"), recorded)


class ErrorHandlerTestCase(unittest.TestCase):

    def handler(self, fatal=False):
        self.stream = io.StringIO()
        return ErrorHandler(fatal=fatal, color=False, stream=self.stream)

    def test_display(self):
        handler = self.handler()
        handler.register_source("script.lox", "var a = 1;\nprint a + ;\n")
        handler.display(Diagnostic("syntax", 2, "at ';'", "Expect expression.", ";"))

        self.assertEqual(
            "script.lox: [line 2] Error at ';': Expect expression.\n"
            "  print a + ;\n"
            "            ^\n",
            self.stream.getvalue()
        )

    def test_display_at_column(self):
        handler = self.handler()
        handler.register_source("script.lox", 'print 1 + 2 + "a";\n')
        handler.display(Diagnostic("runtime", 1, "at '+'", "Operands must be numbers.", "+", 12))

        self.assertEqual(
            "script.lox: [line 1] Error at '+': Operands must be numbers.\n"
            '  print 1 + 2 + "a";\n'
            "              ^\n",
            self.stream.getvalue()
        )

    def test_display_with_stale_column(self):
        handler = self.handler()
        handler.register_source("script.lox", "print a + ;\n")
        handler.display(Diagnostic("syntax", 1, "at ';'", "Expect expression.", ";", 3))
        self.assertIn("  print a + ;\n            ^\n", self.stream.getvalue())

    def test_display_without_source(self):
        handler = self.handler()
        handler.display(Diagnostic("runtime", 5, "at 'x'", "Undefined variable 'x'.", "x"))
        self.assertEqual("[line 5] Error at 'x': Undefined variable 'x'.\n", self.stream.getvalue())

    def test_lox_error_is_displayed(self):
        with self.handler():
            raise ScanError(1, "Unexpected character.")
        self.assertIn("[line 1] Error: Unexpected character.", self.stream.getvalue())

    def test_fatal_exit_codes(self):
        cases = {
            65: ScanError(1, "Unexpected character."),
            70: LoxRuntimeError(Token(TokenType.MINUS, "-", None, 1), "Operand must be a number."),
        }
        for code, error in cases.items():
            with self.assertRaises(SystemExit) as context:
                with self.handler(fatal=True):
                    raise error
            self.assertEqual(code, context.exception.code)

    def test_internal_error(self):
        with self.assertRaises(ValueError):
            with self.handler():
                raise ValueError("boom")
        self.assertIn("[internal] error: unknown error: 'ValueError: boom'", self.stream.getvalue())

    def test_keyboard_interrupt(self):
        with self.handler():
            raise KeyboardInterrupt()
        self.assertIn("error: keyboard interrupt", self.stream.getvalue())

    def test_throw(self):
        with self.assertRaises(SystemExit) as context:
            self.handler(fatal=True).throw("'x.lox' could not be opened", code=66)
        self.assertEqual(66, context.exception.code)


if __name__ == '__main__':
    unittest.main()
