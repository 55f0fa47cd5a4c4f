import os
import unittest
from slang.compiler import compile_files
from slang.expansion import expand_string

example_folder = os.path.join(os.path.split(__file__)[0], '..', 'example')

def example_path(name): return os.path.join(example_folder, name)

class TestPythonic(unittest.TestCase):
	@classmethod
	def setUpClass(cls):
		cls.rule_set = compile_files([example_path('pythonic.macros')])
	
	def test_00_compiles(self):
		self.assertEqual(4, len(self.rule_set))
		self.assertEqual({'pythonic.macros'}, {r.source for r in self.rule_set})
	
	def test_01_countdown(self):
		with open(example_path('countdown.c')) as fh: text = fh.read()
		self.assertEqual(
			'while x < 10:\n  print("%d", x)\n  x += 1\nif x == 10:\n  print("done")\n',
			expand_string(self.rule_set, text),
		)


if __name__ == '__main__':
	unittest.main()
