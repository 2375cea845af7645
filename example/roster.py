"""
A class roster: a title line, then for each student a name, a grade letter,
and a fixed set of three scores. Prints the best average.
"""

from compinput.runtime import setup, input, abort_on_error

SCHEMA = "title: line, k: usize, students: [(String, char, [u32; const 3]); k]"

def best(students):
	name, grade, scores = max(students, key=lambda s: sum(s[2]))
	return name, sum(scores) / len(scores)

@abort_on_error
def main(stream=None):
	setup(stream)
	record = input(SCHEMA)
	name, average = best(record.students)
	print("%s: %s (%.1f)"%(record.title, name, average))

if __name__ == '__main__': main()
