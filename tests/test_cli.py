from scaling_law.cli import build_parser, main


def test_battle_command_prints_log(capsys):
    main(["battle", "--seed", "3", "--level", "1"])
    out = capsys.readouterr().out

    assert out.startswith("Player:")
    assert "Opponent:" in out
    assert "WINNER: PLAYER!" in out or "SYSTEM FAILURE." in out


def test_analyze_command_prints_table(capsys):
    main(["analyze", "--levels", "0", "1", "--battles", "10", "--seed", "2"])
    out = capsys.readouterr().out
    assert "Win rate" in out
    assert len(out.strip().splitlines()) >= 3


def test_parser_defaults():
    args = build_parser().parse_args(["serve"])
    assert args.command == "serve"
    assert isinstance(args.port, int)
