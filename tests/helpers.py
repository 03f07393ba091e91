"""Sample project sources shared across tests."""

APP_WITH_HEADER = """import React from "react";
import Header from "@/components/Header";

export default function App() {
  return (
    <div className="min-h-screen bg-zinc-950">
      <Header />
    </div>
  );
}
"""

HEADER = """export default function Header() {
  return <h1 className="text-2xl font-semibold tracking-tight">Quarterly Revenue</h1>;
}
"""


def component(*imports: str, default: bool = True) -> str:
    """Build a minimal component source importing the given specifiers."""
    lines = [f'import Dep{i} from "{spec}";' for i, spec in enumerate(imports)]
    body = "function Component() {\n  return <div />;\n}\n"
    lines.append(("export default " if default else "export ") + body)
    return "\n".join(lines)
