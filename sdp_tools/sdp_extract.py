#!/usr/bin/env python3
"""
SDP Sound Container -> WAV Extractor

Dumps every clip stored in an .SDP sound container as a standalone 16-bit
.wav file. Clips are either raw little-endian PCM or 4-bit ADPCM (see
adpcm.py); the record layout is documented in sdp_reader.py.

Usage:
    python -m sdp_tools.sdp_extract SOUND.SDP
    python -m sdp_tools.sdp_extract SOUND.SDP -d output/sound
    python -m sdp_tools.sdp_extract SOUND.SDP --list
    python -m sdp_tools.sdp_extract SOUND.SDP --manifest output/sound.json
"""

import os
import sys
import json
import argparse

import numpy as np

from .adpcm import decode_adpcm
from .errors import SDPError, EntryError, OddPcmSize
from .sdp_reader import SDPReader, load_file, read_entry_count
from .wav import write_wav


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Extract WAV clips from an SDP sound container.")
    parser.add_argument("input", help="Path to the .SDP container")
    parser.add_argument("-d", "--output", help="Output directory (default: container name without extension)")
    parser.add_argument("--list", action="store_true", help="Print the entry table and exit")
    parser.add_argument("--manifest", help="Write a JSON catalogue of the entries to this path")
    return parser.parse_args(argv)


def pcm_samples(payload):
    """Reinterpret a raw payload as little-endian signed 16-bit samples."""
    if len(payload) % 2 != 0:
        raise OddPcmSize(f"PCM data size odd ({len(payload)} bytes)")
    return np.frombuffer(payload, dtype='<i2')


def decode_entry(reader, record):
    """Returns (samples, channels) for one record."""
    payload = reader.payload(record)
    if record.compressed:
        return decode_adpcm(payload, record.channels), record.channels
    return pcm_samples(payload), record.channels


def export_entry(reader, record, output_dir):
    samples, channels = decode_entry(reader, record)
    out_path = os.path.join(output_dir, record.output_name + ".wav")
    return write_wav(out_path, samples, channels, record.sample_rate)


def print_table(reader):
    print(f"{'#':>4}  {'id':>8}  {'flags':>6}  {'ch':>2}  {'codec':5}  {'rate':>6}  {'offset':>10}  {'size':>8}  name")
    for r in reader:
        codec = 'adpcm' if r.compressed else 'pcm'
        print(f"{r.index:>4}  {r.id:>8}  {r.flags:#06x}  {r.channels:>2}  {codec:5}  "
              f"{r.sample_rate:>6}  {r.offset:#010x}  {r.size:>8}  {r.name}")


def extract_all(reader, output_dir):
    """
    Export every entry into output_dir. Per-entry failures are reported and
    skipped. Returns the list of manifest rows (one per entry).
    """
    rows = []
    for record in reader:
        row = record.to_dict()
        try:
            out_path = export_entry(reader, record, output_dir)
        except EntryError as e:
            print(f"Skipping entry {record.index}: {e}", file=sys.stderr)
            row['error'] = str(e)
        else:
            label = "(decoded):" if record.compressed else "(pcm):    "
            print(f"Exported {label} {out_path}")
            row['file'] = out_path
        rows.append(row)
    return rows


def default_output_dir(input_path):
    return os.path.splitext(os.path.basename(input_path))[0]


def main(argv=None):
    args = parse_args(argv)

    try:
        data = load_file(args.input)
        print(f"Found {read_entry_count(data)} wav entries")
        reader = SDPReader(data)
    except SDPError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.list:
        print_table(reader)
        return 0

    output_dir = args.output or default_output_dir(args.input)
    try:
        os.makedirs(output_dir, exist_ok=True)
    except OSError as e:
        print(f"Failed to create output dir {output_dir}: {e}", file=sys.stderr)
        return 1

    rows = extract_all(reader, output_dir)

    if args.manifest:
        manifest = {
            'source': os.path.abspath(args.input),
            'output_dir': os.path.abspath(output_dir),
            'entries': rows,
        }
        try:
            with open(args.manifest, 'w') as f:
                json.dump(manifest, f, indent=2)
        except OSError as e:
            print(f"Failed to write manifest {args.manifest}: {e}", file=sys.stderr)
        else:
            print(f"Manifest written to {args.manifest}")

    print("Done.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
