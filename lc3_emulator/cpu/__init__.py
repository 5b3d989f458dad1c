# CPU core: register set, ALU helpers, opcode decoder.
