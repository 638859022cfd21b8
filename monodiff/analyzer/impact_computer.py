from collections import deque
from collections.abc import Iterable

from monodiff.schema.schema import Workspace


def compute_impact(workspace: Workspace, reverse_adjacency: dict[str, list[str]], changed: Iterable[str]) -> set[str]:
    """変更パッケージから依存元を幅優先で辿り、影響を受けるパッケージの集合を返す

    ワークスペースに無い名前は捨てる。訪問済みの印を付けるので循環があっても停止する。
    """
    visited: set[str] = set()
    queue: deque[str] = deque()
    for name in sorted(set(changed)):
        if name in workspace:
            visited.add(name)
            queue.append(name)

    while queue:
        current = queue.popleft()
        for dependent in reverse_adjacency.get(current, []):
            if dependent not in visited and dependent in workspace:
                visited.add(dependent)
                queue.append(dependent)

    return visited
