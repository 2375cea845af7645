"""
Read an undirected graph given as an edge list, and print the degree of each vertex.
Vertices in the input are numbered from one.

	py -m example.degrees < graph.txt
"""

from compinput.runtime import setup, input, abort_on_error

SCHEMA = """
	n, m: usize
	edges: [(usize1, usize1); m]
"""

def degrees(n:int, edges) -> list[int]:
	result = [0] * n
	for a, b in edges:
		result[a] += 1
		result[b] += 1
	return result

@abort_on_error
def main(stream=None):
	setup(stream)
	n, m, edges = input(SCHEMA)
	print(' '.join(map(str, degrees(n, edges))))

if __name__ == '__main__': main()
