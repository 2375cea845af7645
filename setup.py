import setuptools

setuptools.setup(
	name='comp-input',
	version='0.1.0',
	packages=[
		'compinput',
	],
	description='Terse, fast reading of whitespace-delimited input into typed values',
	long_description=open('README.md').read(),
	long_description_content_type="text/markdown",
	python_requires='>=3.9',
	classifiers=[
		"Programming Language :: Python :: 3.9",
		"License :: OSI Approved :: MIT License",
		"Operating System :: OS Independent",
		"Topic :: Text Processing",
		"Development Status :: 3 - Alpha",
    ],
)
