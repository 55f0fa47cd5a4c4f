import io
import os
import contextlib
import tempfile
import unittest
from unittest import mock
from slang import expansion
from slang.__main__ import parse_arguments, main

MACROS = '#define if ( $cond ) { $block }\nif $cond:\n  $block\n'

class TestCommandLine(unittest.TestCase):
	def setUp(self):
		self.folder = tempfile.TemporaryDirectory()
		self.macros = self.path('if.macros', MACROS)
		self.source = self.path('input.c', 'if (a == b) { some_func(); }\n')
	
	def tearDown(self):
		self.folder.cleanup()
		expansion.VERBOSE = False
	
	def path(self, name, text=None):
		path = os.path.join(self.folder.name, name)
		if text is not None:
			with open(path, 'w') as fh: fh.write(text)
		return path
	
	def read(self, path):
		with open(path) as fh: return fh.read()
	
	def test_00_files(self):
		target = self.path('output.py')
		main(parse_arguments([self.macros, '-i', self.source, '-o', target]))
		self.assertEqual('if a == b:\n  some_func();\n', self.read(target))
	
	def test_01_standard_streams(self):
		stdout = io.StringIO()
		with mock.patch('sys.stdin', io.StringIO('if (x) { y(); }')), contextlib.redirect_stdout(stdout):
			main(parse_arguments([self.macros]))
		self.assertEqual('if x:\n  y();', stdout.getvalue())
	
	def test_02_will_not_overwrite(self):
		target = self.path('output.py', 'precious')
		with contextlib.redirect_stderr(io.StringIO()), self.assertRaises(SystemExit) as cm:
			main(parse_arguments([self.macros, '-i', self.source, '-o', target]))
		self.assertEqual(1, cm.exception.code)
		self.assertEqual('precious', self.read(target))
		main(parse_arguments([self.macros, '-i', self.source, '-o', target, '-f']))
		self.assertEqual('if a == b:\n  some_func();\n', self.read(target))
	
	def test_03_compile_error(self):
		broken = self.path('broken.macros', '#define f $a\n$b\n')
		stderr = io.StringIO()
		with contextlib.redirect_stderr(stderr), self.assertRaises(SystemExit) as cm:
			main(parse_arguments([broken, '-i', self.source]))
		self.assertEqual(1, cm.exception.code)
		self.assertIn('Error while compiling macros', stderr.getvalue())
		self.assertIn('Excerpt from '+broken, stderr.getvalue())
	
	def test_04_expansion_error(self):
		source = self.path('bad.c', 'if (a { b }\n')
		stderr = io.StringIO()
		with contextlib.redirect_stderr(stderr), self.assertRaises(SystemExit):
			main(parse_arguments([self.macros, '-i', source]))
		self.assertIn('Error while expanding', stderr.getvalue())
		self.assertIn('Excerpt from '+source, stderr.getvalue())
	
	def test_05_limits_and_verbosity(self):
		looping = self.path('loop.macros', '#define loop $x\nloop $x\n')
		source = self.path('loop.txt', 'loop 1')
		stderr = io.StringIO()
		with contextlib.redirect_stderr(stderr), self.assertRaises(SystemExit):
			main(parse_arguments([looping, '-i', source, '--max-rewrites', '3', '-v']))
		self.assertEqual(3, stderr.getvalue().count('turns 2 tokens into 2'))
		self.assertIn('limit of 3', stderr.getvalue())
	
	def test_06_missing_file(self):
		with contextlib.redirect_stderr(io.StringIO()), self.assertRaises(SystemExit):
			main(parse_arguments([self.path('nonexistent.macros'), '-i', self.source]))


if __name__ == '__main__':
	unittest.main()
