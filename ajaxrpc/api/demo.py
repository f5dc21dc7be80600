"""Demonstration service and the page that calls it from the browser."""

from __future__ import annotations

from ajaxrpc.rpc.server import RpcServer


class Service:
    """Adds two numbers; exposed as ``Service.Add``."""

    def Add(self, a: float, b: float) -> tuple[float, Exception | None]:
        return a + b, None


INDEX_HTML = """<html>
<head>
	<title>Json RPC</title>
	<script type="text/javascript" src="https://ajax.googleapis.com/ajax/libs/jquery/1.4.4/jquery.min.js"></script>
	<script type="text/javascript">
	$(function(){
		$('#button').click(function(){
			var a = $('#a').val();
			var b = $('#b').val();
			var body = '{"jsonrpc": "2.0", "method":"Service.Add","params":['+a+', '+b+'],"id":0}';
			$.post("__RPC_PATH__", body ,function(data){
				$('#output').html(data.result !== undefined ? data.result : data.error);
			}, "json");
		});
	});
	</script>
</head>
<body>
	<h1>ajaxrpc example</h1>
	<input id="a" type="text" name="a" style="width: 50px;" value="5" />
	<span>+</span>
	<input id="b" type="text" name="b" style="width: 50px;" value="7" />
	<input id="button" type="button" value="="/>
	<span id="output"></span>
</body>
</html>"""


def render_index(rpc_path: str = "/json") -> str:
    return INDEX_HTML.replace("__RPC_PATH__", rpc_path)


def build_demo_server() -> RpcServer:
    """RpcServer with the demo ``Service`` registered."""
    server = RpcServer()
    server.register(Service())
    return server
