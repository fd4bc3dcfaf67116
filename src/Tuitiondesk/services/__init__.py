"""Operations the screens call: fetch a snapshot, run the core, persist."""
