from argparse import ArgumentParser, FileType, REMAINDER, OPTIONAL
import sys
import traceback

from prompt_toolkit import PromptSession

from .util import DCError
from .machine import Machine
from .lexer import Lexer
from . import log


class InteractiveInput:
    def __init__(self, prompt):
        self.prompt = prompt

    def __iter__(self):
        try:
            session = PromptSession(message=self.prompt,
                                    vi_mode=True,
                                    enable_suspend=True,
                                    enable_open_in_editor=True,
                                    history=None,
                                    prompt_continuation=' ' * len(self.prompt),
                                    # Certainly not! But be explicit.
                                    erase_when_done=False)
            while True:
                yield session.prompt()
        except EOFError:
            return


class CLI:
    '''
    Command line interface to dc calculator.
    '''

    DEFAULT_PROMPT = '> '
    NAME = 'pydc'

    def dumper(self):
        '''
        Dump all lexemes: kind, text, and what they parse to.
        '''
        lexer = Lexer()
        print('<kind>\t<repr(text)>\t<parsed>')
        for text in self._programs():
            for match in lexer.lex(text):
                parsed = lexer.parse(match)
                print(lexer.kind(match),
                      repr(match.group(0)),
                      '' if parsed is None else repr(parsed),
                      sep='\t')

    def executor(self):
        '''
        Run machine (dc calculator).

        Interactively, an error abandons the rest of its line only. Otherwise
        it ends everything.
        '''
        machine = Machine(max_depth=self.args.max_depth)
        interactive = self._interactive()
        for text in self._programs():
            if interactive:
                try:
                    machine.run(text)
                except DCError as e:
                    self._report(e)
            else:
                machine.run(text)
            if machine.halted:
                break

    def raw_grammar(self):
        '''
        Print current internally defined grammar.
        '''
        lexer = Lexer()
        print(lexer.LEXEME)

    def _programs(self):
        '''
        Yield program texts, in the order they should run.

        A file or stdin is read whole, as a single program; expressions and
        interactive lines are one program each.
        '''
        if self.args.expressions:
            yield from self.args.expressions
        elif self.args.file is not None:
            with self.args.file as fp:
                yield fp.read()
        elif self._interactive():
            yield from InteractiveInput(prompt=self.args.prompt or
                                        self.DEFAULT_PROMPT)
        else:
            yield sys.stdin.read()

    def _interactive(self):
        '''
        Prompt for lines when either:

        - prompt explicitly specified.
        - both stdin/out are a tty, and there is nothing else to read.
        '''
        if self.args.expressions or self.args.file is not None:
            return False
        return bool(self.args.prompt or
                    sys.stdin.isatty() and
                    sys.stdout.isatty())

    def _report(self, error):
        if self.args.verbose:
            traceback.print_exception(type(error), error,
                                      error.__traceback__,
                                      file=sys.stderr)
        print('{}: {}'.format(self.NAME, error), file=sys.stderr)

    def __init__(self):
        '''
        Create ready to run CLI.

        Does not run or parse command line arguments.
        '''
        self.argument_parser = ArgumentParser(prog=self.NAME,
                                              description='dc calculator')
        self.argument_parser.add_argument('-v', '--verbose',
                                          action='store_true',
                                          help='log to memory and dump the '
                                               'log after running; show '
                                               'tracebacks')
        self.argument_parser.add_argument('--max-depth',
                                          type=int,
                                          default=Machine.DEFAULT_MAX_DEPTH,
                                          help='most nested command '
                                               'executions')
        self.argument_parser.add_argument('file',
                                          nargs=OPTIONAL,
                                          type=FileType('r'),
                                          help='program to run instead of '
                                               'stdin')
        int_nonint_groups = self.argument_parser.add_mutually_exclusive_group()
        int_nonint_groups.add_argument('-e', '--expression',
                                       nargs=REMAINDER,
                                       dest='expressions')
        int_nonint_groups.add_argument('-p', '--prompt',
                                       nargs=OPTIONAL,
                                       const=self.DEFAULT_PROMPT)
        main_groups = self.argument_parser.add_mutually_exclusive_group()
        for short_, long_, action in [('-G', '--raw-grammar',
                                       self.raw_grammar),
                                      ('-D', '--dump', self.dumper)]:
            main_groups.add_argument(short_, long_,
                                     action='store_const',
                                     const=action,
                                     dest='action')
        self.argument_parser.set_defaults(action=self.executor)

    def run(self, *, args=None):
        '''
        Run CLI, given these args, or previously passed CLI args.

        Returns the exit status.
        '''
        self.args = self.argument_parser.parse_args(args)
        if self.args.expressions and self.args.file is not None:
            self.args.file.close()
            self.argument_parser.error('a program file and -e expressions '
                                       'cannot be combined')
        handler = log.enable() if self.args.verbose else None
        try:
            self.args.action()
        except DCError as e:
            self._report(e)
            return 1
        except KeyboardInterrupt:
            return 1
        finally:
            if handler is not None:
                handler.dump(sys.stderr)
                log.disable(handler)
        return 0


def main():
    sys.exit(CLI().run())
