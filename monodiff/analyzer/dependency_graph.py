import networkx as nx

from monodiff.schema.schema import Workspace
from monodiff.utils.log_util import log


class DependencyGraph:
    """パッケージ間の依存グラフ(u -> v: uがvに依存)

    ノードはワークスペースの全パッケージ、エッジはローカル依存のみ。
    外部ライブラリへの依存はグラフに載せない。構築後は変更不可。
    """

    def __init__(self, workspace: Workspace):
        self.nx_graph = nx.DiGraph()
        self.nx_graph.add_nodes_from(sorted(workspace))
        for name in sorted(workspace):
            for dep_name in sorted(workspace[name].dependencies):
                if dep_name in workspace:
                    self.nx_graph.add_edge(name, dep_name)
        nx.freeze(self.nx_graph)
        log("nodes= %d, edges= %d", self.nx_graph.number_of_nodes(), self.nx_graph.number_of_edges())

    def forward_adjacency(self) -> dict[str, list[str]]:
        """パッケージ名 => 依存先(dependencies)"""
        return {name: sorted(self.nx_graph.successors(name)) for name in sorted(self.nx_graph.nodes)}

    def reverse_adjacency(self) -> dict[str, list[str]]:
        """パッケージ名 => 依存元(dependents)"""
        return {name: sorted(self.nx_graph.predecessors(name)) for name in sorted(self.nx_graph.nodes)}

    def has_edge(self, from_name: str, to_name: str) -> bool:
        return self.nx_graph.has_edge(from_name, to_name)
