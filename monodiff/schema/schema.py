from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class OutputFormat(str, Enum):
    TEXT = "text"  # 人間向けのリスト表示
    JSON = "json"  # CI向けのJSON

    def __str__(self):
        return self.value

    def __repr__(self) -> str:
        return self.value

    @staticmethod
    def get_description():
        description_list = ["出力形式を指定します。"]
        for i, output_format in enumerate(OutputFormat):
            description_list.append(f"  {i}: " + str(output_format))
        return "\n".join(description_list)


class PackageManifest(BaseModel):
    """package.json のうちmonodiffが解釈するフィールド(それ以外は無視)"""

    model_config = ConfigDict(extra="ignore")

    name: str | None = Field(default=None, description="パッケージ名(空ならディレクトリ名を使う)")
    dependencies: dict[str, str | None] | None = Field(default=None)
    dev_dependencies: dict[str, str | None] | None = Field(default=None, alias="devDependencies")
    peer_dependencies: dict[str, str | None] | None = Field(default=None, alias="peerDependencies")

    def merged_dependencies(self) -> dict[str, str]:
        """dependencies => devDependencies => peerDependencies の順にマージ(後勝ち)"""
        merged: dict[str, str] = {}
        for deps in (self.dependencies, self.dev_dependencies, self.peer_dependencies):
            if not deps:
                continue
            for dep_name, version_spec in deps.items():
                merged[dep_name] = version_spec or ""
        return merged


class Package(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(description="ワークスペース内で一意なパッケージ名")
    path: str = Field(default="", description="マニフェストのあるディレクトリ(リポジトリルートからの相対パス、ルートは空文字)")
    dependencies: dict[str, str] = Field(default_factory=dict, description="依存先の名前 => バージョン指定(解釈しない)")

    def is_root(self) -> bool:
        return self.path == ""


# パッケージ名 => Package
Workspace = dict[str, Package]


class ImpactReport(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_ref: str = Field(default="", alias="from", description="比較元のgit ref(--from)")
    to_ref: str = Field(default="HEAD", alias="to", description="比較先のgit ref(--to)")
    changed: list[str] = Field(default_factory=list, description="変更ファイルを含むパッケージ(ソート済み)")
    impacted: list[str] = Field(default_factory=list, description="推移的に影響を受けるパッケージ(ソート済み)")
    graph: dict[str, list[str]] = Field(default_factory=dict, description="パッケージ名 => ローカル依存先")

    @field_validator("changed", "impacted")
    @classmethod
    def sort_names(cls, names: list[str]) -> list[str]:
        return sorted(set(names))

    @field_validator("graph")
    @classmethod
    def sort_graph(cls, graph: dict[str, list[str]]) -> dict[str, list[str]]:
        return {name: sorted(graph[name]) for name in sorted(graph)}

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)

    def to_text(self) -> str:
        lines = ["Changed packages:"]
        lines += [f" - {name}" for name in self.changed]
        lines.append("")
        lines.append("Impacted packages (transitive):")
        lines += [f" - {name}" for name in self.impacted]
        return "\n".join(lines)

    def render(self, output_format: OutputFormat) -> str:
        if output_format == OutputFormat.JSON:
            return self.to_json()
        return self.to_text()


class MonodiffParams(BaseModel):
    from_ref: str = Field(default="", description="比較元のgit ref")
    to_ref: str = Field(default="HEAD", description="比較先のgit ref")
    root: str = Field(default=".", description="リポジトリルート")
    output_format: OutputFormat = Field(default=OutputFormat.TEXT, description="出力形式")

    def get_monodiff_command(self) -> str:
        return f"monodiff --from {self.from_ref} --to {self.to_ref} --root {self.root} --format {self.output_format}"
