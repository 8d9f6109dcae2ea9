from limbarray import adopt, allocate_zeroed, declare_inplace, render_base2, render_base16


def main() -> None:
    declared = declare_inplace(33)
    for idx in range(0, 33):
        declared.toggle(idx)

    print("declared:", render_base16(declared))

    heap = allocate_zeroed(64)
    if heap is None:
        raise SystemExit("could not allocate a 64 bit array")

    with heap:
        heap.set(0)
        heap.set(31)
        print("heap:    ", render_base2(heap))

    buf = bytearray(16)
    adopted = adopt(buf)
    if adopted is None:
        raise SystemExit("buffer too small to adopt")

    adopted.set(7)
    print("adopted: ", adopted, buf.hex())


if __name__ == "__main__":
    main()
