from io import StringIO

from pytest import Item, fixture

from pydc.machine import Machine


def pytest_assertion_pass(item: Item,
                          lineno: int,
                          orig: str,
                          expl: str) -> None:
    '''
    Log every assertion, in case we later need to audit a run.

    Excessive in most cases.

    Use with pytest -rP.
    '''
    print('given', item.name + ':' + str(lineno), str(orig))  # no repr()!)
    print('actual', item.name + ':' + str(lineno),
          '\n'.join(str(expl).splitlines()[:-2]))


@fixture
def machine() -> Machine:
    '''
    Fresh machine printing to a StringIO.
    '''
    return Machine(output=StringIO())


@fixture
def run(machine: Machine):
    '''
    Run a program on the machine fixture, return everything printed so far.
    '''
    def run(text: str) -> str:
        machine.run(text)
        return machine.output.getvalue()
    return run
