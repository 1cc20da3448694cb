#!/usr/bin/env python3
"""
Example usage of Parallel Chunks.

This script writes a small CSV file, encrypts it with both the whole-file
and the chunked strategy, and decrypts it again.
"""

import tempfile
from pathlib import Path
from parallel_chunks import FileCryptor, ChunkLayout, ProcessingError


def main():
    """Main example function."""
    print("Parallel Chunks Example")
    print("=" * 50)

    with tempfile.TemporaryDirectory() as temp_dir:
        source = Path(temp_dir) / "stories.csv"
        rows = [f"{i},Story number {i},{'lorem ipsum ' * (i % 7)}" for i in range(2000)]
        source.write_text("id,title,body\n" + "\n".join(rows) + "\n", encoding="utf-8")
        print(f"Source file: {source} ({source.stat().st_size} bytes)")

        # 16KB chunks so that a small demo file still splits into several chunks
        cryptor = FileCryptor(layout=ChunkLayout(chunk_size_bytes=16 * 1024), delay_divisor=2000)

        try:
            print("\nEncrypting...")
            for result in cryptor.encrypt(source):
                print(f"✅ {result.operation}: {result.input_size} -> {result.output_size} bytes "
                      f"in {result.duration * 1000:.0f} ms")

            chunk_dir = FileCryptor.chunked_target(source)
            print(f"\nChunk set {chunk_dir.name}:")
            for path in sorted(chunk_dir.iterdir(), key=lambda p: (len(p.name), p.name)):
                print(f"   {path.name} ({path.stat().st_size} bytes)")

            print("\nDecrypting...")
            restored = Path(temp_dir) / "restored.csv"
            result = cryptor.decrypt_chunked(source, restored)
            print(f"✅ {result.operation}: {result.chunk_count} chunks "
                  f"in {result.duration * 1000:.0f} ms")
            print(f"   Restored file matches source: {restored.read_bytes() == source.read_bytes()}")

            print()
            print(cryptor.profiler.export_metrics("summary"))

        except ProcessingError as e:
            print(f"❌ {e.error_type.value}: {e}")
            print(f"   {cryptor.error_handler.handle_processing_error(e).suggested_action}")


if __name__ == "__main__":
    main()
