"""Handles interactive/command-line mode for lambdaeval. Uses cmd as backend (and thus readline for history, if
available).
"""

import cmd


class Shell(cmd.Cmd):
    """Lambda calculus interpreter shell."""
    intro = "Lambda calculus interpreter :: Python backend\nType 'help' for more information."
    prompt = "λ> "
    LAMBDA_ALIAS = "\\"  # easier to type than λ
    COMMANDS = ("help", "exit", "EOF")  # EOF is also what cmdloop sends at end of input

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess
        self.line_num = 0
        self._blank_lines = 0

    def precmd(self, line):
        """Replaces every backslash with λ."""
        return line.replace(Shell.LAMBDA_ALIAS, "λ")

    def parseline(self, line):
        """Only a line that is exactly a command name runs that command. Anything else, including 'help me', '?x' or
        '!x', goes to default as a λ-term.
        """
        line = line.strip()
        if line in Shell.COMMANDS:
            return line, "", line
        return None, None, line

    def onecmd(self, line):
        if line.strip():
            self._blank_lines = 0
        return super().onecmd(line)

    def default(self, line):
        """Interprets arbitrary λ-term or binding."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            self.sess.error_handler.at_line(self.sess.path, line, self.line_num)

            result = self.sess.interpret(line)
            if not result.ok:
                self.sess.error_handler.throw(result.error)
                return

            print(result.value)
            self.sess.error_handler.clear_line()

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the lambdaeval interpreter!\n\n"
              "Type a λ-term (or use '\\' for 'λ') to reduce it to normal form: each β-reduction is\n"
              "printed as it happens. Variables are single characters, so 'xy' means 'x' applied to 'y'.\n\n"
              "Results are printed fully parenthesized, with an abstraction that is applied or passed as an\n"
              "argument wrapped in its own parentheses: 'f (λx.x)' prints as '(f (λx.x))'. Any result can be\n"
              "typed back in as is.\n\n"
              "Try it out by typing 'let I = λx.x'. This will bind the λ-term 'λx.x' to the name 'I'.\n"
              "Next, try typing 'I y'. This will apply 'I' to 'y', giving 'y' as the result.\n\n"
              "Two empty lines in a row (or 'exit') will exit the interpreter.")

    def emptyline(self):
        """Do not repeat previous command on empty line. Exits on the second empty line in a row."""
        self._blank_lines += 1
        return self._blank_lines >= 2

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
