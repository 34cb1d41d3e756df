"""Shared fixtures for index tests.

``miden_workspace`` lays out a small Cargo workspace shaped like the Miden
repositories::

    ws/
      Cargo.toml                       [workspace]
      crates/miden-protocol/
        build.rs                       miden::protocol -> protocol
        asm/protocol/account.masm
        asm/protocol/faucets/mod.masm
        asm/shared_modules/account_id.masm
        asm/kernels/transaction/main.masm
        asm/kernels/transaction/lib/{api,memory}.masm
      crates/miden-agglayer/
        build.rs                       assemble_library_from_dir(.., "miden::agglayer")
        asm/bridge_lib/bridge/out.masm

``cargo_home`` lays out a registry cache and points $CARGO_HOME at it.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from masmnav.index.ops import NavigationSession

MAIN_MASM = """\
use $kernel::api
use $kernel::memory
use $kernel::account_id
use miden::protocol::account
use miden::protocol::faucets->fct
use miden::protocol::account::MAX_ASSETS
use std::crypto::hashes::blake3

# exec.api::get_nonce is documented in memory
const LOCAL_CONST = 1

#! Entry point.
pub proc main
    exec.api::get_nonce
    exec.account::get_id
    call.helper
    exec.fct::distribute
    push."exec.api::get_nonce"
end

proc helper
    exec.get_balance
    exec.blake3::hash
end
"""

API_MASM = """\
pub use memory::get_account_nonce->get_nonce
pub use memory::missing->gone
"""

MEMORY_MASM = """\
# Memory layout

#! Returns the account nonce.
#!
#! Outputs: [nonce]
pub proc get_account_nonce
    push.0
end

# internal
proc get_balance
    push.1
end
"""

ACCOUNT_MASM = """\
const MAX_ASSETS = 256

#! Returns the account id.
pub proc get_id
    push.1
end

pub proc undocumented
    push.2
end
"""

PROTOCOL_BUILD_RS = """\
const PROTOCOL_LIB_NAMESPACE: &str = "miden::protocol";
const ASM_PROTOCOL_DIR: &str = "protocol";
const ASM_NOTE_SCRIPTS_DIR: &str = "note_scripts";
"""

AGGLAYER_BUILD_RS = """\
const ASM_NOTE_SCRIPTS_DIR: &str = "note_scripts";
const ASM_AGGLAYER_DIR: &str = "bridge_lib";

fn main() {
    let source_dir = build_dir.join(ASM_AGGLAYER_DIR);
    assembler.assemble_library_from_dir(source_dir, "miden::agglayer")?;
}
"""


def write_tree(root: Path, files: dict[str, str]) -> None:
    """Write ``files`` (relative path -> content) under ``root``."""
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)


def cursor(text: str, needle: str, word: str | None = None) -> tuple[str, int]:
    """Line containing ``needle`` and the column of ``word`` (default: needle) in it."""
    for line in text.split("\n"):
        if needle in line:
            return line, line.index(word or needle, line.index(needle))
    raise AssertionError(f"{needle!r} not found")


@pytest.fixture
def miden_workspace(tmp_path: Path) -> Path:
    """Create a Miden-shaped Cargo workspace; returns the workspace root."""
    ws = tmp_path / "ws"
    protocol = "crates/miden-protocol"
    kernel = f"{protocol}/asm/kernels/transaction"
    write_tree(
        ws,
        {
            "Cargo.toml": '[workspace]\nmembers = ["crates/*"]\n',
            f"{protocol}/Cargo.toml": '[package]\nname = "miden-protocol"\n',
            f"{protocol}/build.rs": PROTOCOL_BUILD_RS,
            f"{protocol}/asm/protocol/account.masm": ACCOUNT_MASM,
            f"{protocol}/asm/protocol/faucets/mod.masm": "pub proc distribute\n    push.1\nend\n",
            f"{protocol}/asm/shared_modules/account_id.masm": "pub proc validate\nend\n",
            f"{kernel}/main.masm": MAIN_MASM,
            f"{kernel}/lib/api.masm": API_MASM,
            f"{kernel}/lib/memory.masm": MEMORY_MASM,
            "crates/miden-agglayer/build.rs": AGGLAYER_BUILD_RS,
            "crates/miden-agglayer/asm/bridge_lib/bridge/out.masm": "pub proc bridge_out\nend\n",
        },
    )
    return ws


@pytest.fixture
def main_file(miden_workspace: Path) -> Path:
    return miden_workspace / "crates/miden-protocol/asm/kernels/transaction/main.masm"


@pytest.fixture
def cargo_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create a registry cache and point $CARGO_HOME at it."""
    home = tmp_path / "cargo"
    index = "registry/src/index.crates.io-6f17d22bba15001f"
    write_tree(
        home,
        {
            f"{index}/miden-stdlib-0.9.0/asm/crypto/hashes/blake3.masm": (
                "#! Old hash.\npub proc hash\nend\n"
            ),
            f"{index}/miden-stdlib-0.10.0/asm/crypto/hashes/blake3.masm": (
                "#! Hashes the top of the stack.\npub proc hash\nend\n"
            ),
            f"{index}/miden-core-lib-0.1.0/asm/mem.masm": "pub proc load\nend\n",
            f"{index}/miden-core-lib-0.1.0/asm/collections/mod.masm": "pub proc new\nend\n",
            f"{index}/miden-faucet-lib-0.2.0/asm/tokens.masm": "pub proc mint\nend\n",
            f"{index}/unrelated-1.0.0/asm/mem.masm": "pub proc load\nend\n",
        },
    )
    monkeypatch.setenv("CARGO_HOME", str(home))
    return home


@pytest.fixture
def session(cargo_home: Path) -> NavigationSession:  # noqa: ARG001
    """Session with default config and the fake registry in place."""
    return NavigationSession()
