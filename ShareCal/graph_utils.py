"""
Helpers for the branch-named hierarchy graph held by a sector. Nodes are named using branch
notation (e.g. `electricity.coal.pulverized coal`), so a node's parent can be found from its name.
"""
import networkx as nx


def parent_name(node):
    """
    node is a branch name (str)
    CAUTION: the root is its own parent
    """
    parent = '.'.join(node.split('.')[:-1])
    return parent or node


def child_name(parent, name):
    """
    Find the branch name of a child of `parent`. Names may not contain '.', since it separates the
    levels of the hierarchy.
    """
    if '.' in name:
        raise ValueError(f"Name '{name}' can't contain '.'")
    return f"{parent}.{name}"


def add_child(graph: nx.DiGraph, parent, name, record):
    """
    Add a node for `record` as the last child of `parent`.

    Returns
    -------
    str :
        The branch name of the new node.
    """
    node = child_name(parent, name)
    if node in graph:
        raise ValueError(f"{node} already exists")
    graph.add_node(node, record=record)
    graph.add_edge(parent, node)
    return node


def children(graph: nx.DiGraph, node):
    """
    The records of `node`'s children, in the order they were added.
    """
    return [graph.nodes[child]['record'] for child in graph.successors(node)]


def get_record(graph: nx.DiGraph, node):
    if node not in graph:
        raise KeyError(f"{node} is not in the graph")
    return graph.nodes[node]['record']
