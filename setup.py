import setuptools

setuptools.setup(
	name='slang-macros',
	version='0.1.0',
	packages=[
		'slang',
	],
	description='A macro expansion program for simple language abstractions',
	long_description=open('README.md').read(),
	long_description_content_type="text/markdown",
	python_requires='>=3.9',
	classifiers=[
		"Programming Language :: Python :: 3.9",
		"License :: OSI Approved :: MIT License",
		"Operating System :: OS Independent",
		"Topic :: Software Development :: Pre-processors",
		"Development Status :: 3 - Alpha",
    ],
)
